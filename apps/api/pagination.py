# apps/api/pagination.py
from django.conf import settings
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class EnvelopePagination(PageNumberPagination):
    """
    ?page=&limit= pagination wrapped in the API response envelope.

    {"status": "success", "message": ..., "data": [...],
     "pagination": {"page", "limit", "totalCount", "hasMore"}}
    """
    page_size_query_param = 'limit'
    message = 'Records fetched successfully'

    @property
    def max_page_size(self):
        return getattr(settings, 'REPORT_MAX_LIMIT', 1000)

    def get_paginated_response(self, data):
        return Response({
            'status': 'success',
            'message': self.message,
            'data': data,
            'pagination': {
                'page': self.page.number,
                'limit': self.page.paginator.per_page,
                'totalCount': self.page.paginator.count,
                'hasMore': self.page.has_next(),
            },
        })

    def get_paginated_response_schema(self, schema):
        return {
            'type': 'object',
            'properties': {
                'status': {'type': 'string', 'example': 'success'},
                'message': {'type': 'string'},
                'data': schema,
                'pagination': {
                    'type': 'object',
                    'properties': {
                        'page': {'type': 'integer'},
                        'limit': {'type': 'integer'},
                        'totalCount': {'type': 'integer'},
                        'hasMore': {'type': 'boolean'},
                    },
                },
            },
        }
