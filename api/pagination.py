# api/pagination.py
import math

from rest_framework.exceptions import ValidationError
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class RowsPagination(PageNumberPagination):
    """
    Paginación con la forma {rows, count, totalPages, currentPage}
    y tamaño de página configurable con ?limit=.
    """
    page_size = 10
    page_size_query_param = 'limit'
    max_page_size = 200

    def get_paginated_response(self, data):
        count = self.page.paginator.count
        page_size = self.page.paginator.per_page
        return Response({
            'rows': data,
            'count': count,
            'totalPages': math.ceil(count / page_size) if page_size else 0,
            'currentPage': self.page.number,
        })


class SortingMixin:
    """
    Ordenación con ?sort_by=<campo>&sort_dir=asc|desc contra una lista blanca
    `sortable_fields` (nombre público -> expresión ORM).
    """
    sortable_fields = {}
    default_sort = None

    def sort_queryset(self, queryset):
        sort_by = self.request.query_params.get('sort_by')
        sort_dir = (self.request.query_params.get('sort_dir') or 'asc').lower()
        if not sort_by:
            return queryset.order_by(*self.default_sort) if self.default_sort else queryset
        if sort_by not in self.sortable_fields:
            raise ValidationError({'sort_by': f"Campo de ordenación no permitido: {sort_by}"})
        if sort_dir not in ('asc', 'desc'):
            raise ValidationError({'sort_dir': "Debe ser 'asc' o 'desc'."})
        field = self.sortable_fields[sort_by]
        return queryset.order_by(f"-{field}" if sort_dir == 'desc' else field, 'id')
