from django.db import models
from common.models import BaseModel


class Brand(BaseModel):
    name = models.CharField(max_length=120, unique=True)  # exact, case-sensitive match

    class Meta:
        ordering = ("name",)

    def __str__(self):
        return self.name
