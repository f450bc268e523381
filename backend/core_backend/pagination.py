from rest_framework.pagination import PageNumberPagination


class StandardPagination(PageNumberPagination):
    """Page-number pagination shared by all list endpoints."""

    page_size = 20
    page_size_query_param = "limit"
    max_page_size = 100
