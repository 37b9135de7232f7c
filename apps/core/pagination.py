"""
Custom pagination classes
"""
from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """
    Standard pagination with 20 items per page
    """
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class LimitPagePagination(PageNumberPagination):
    """
    Page number pagination that takes the page size from `limit`,
    used by the transaction and notification histories
    """
    page_size = 20
    page_size_query_param = 'limit'
    max_page_size = 100
