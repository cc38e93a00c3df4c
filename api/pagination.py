"""
Page-number pagination with a ``per_page`` size selector
"""
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from core.constants import Pagination


class PerPagePagination(PageNumberPagination):
    """
    ?page=N&per_page=M where M is one of the offered sizes.

    Sizes outside the offered choices fall back to the default size.
    """
    page_size = Pagination.DEFAULT_PAGE_SIZE
    page_size_query_param = 'per_page'
    page_size_choices = Pagination.PAGE_SIZE_CHOICES
    max_page_size = Pagination.MAX_PAGE_SIZE

    def get_page_size(self, request):
        size = super().get_page_size(request)
        if size not in self.page_size_choices:
            return self.page_size
        return size

    def get_paginated_response(self, data):
        return Response({
            'count': self.page.paginator.count,
            'page': self.page.number,
            'per_page': self.page.paginator.per_page,
            'total_pages': self.page.paginator.num_pages,
            'next': self.get_next_link(),
            'previous': self.get_previous_link(),
            'results': data,
        })


class RentalPagination(PerPagePagination):
    """Rental groups on the apartment page: 5 per page by default"""
    page_size = Pagination.RENTAL_PAGE_SIZE
    page_size_choices = Pagination.RENTAL_PAGE_SIZE_CHOICES
