from rest_framework.pagination import PageNumberPagination


class DefaultPagination(PageNumberPagination):
    page_size = 25
    page_size_query_param = "page_size"
    max_page_size = 200


class AuditPagination(PageNumberPagination):
    """Audit screen pages with ?page=&limit= (20 per page by default)."""
    page_size = 20
    page_size_query_param = "limit"
    max_page_size = 200
