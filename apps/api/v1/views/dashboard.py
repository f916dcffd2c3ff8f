# apps/api/v1/views/dashboard.py
"""
Dashboard API endpoints.

Thin wrappers over apps.reporting.dashboard; all three are read-only.
"""
from rest_framework.views import APIView
from rest_framework.response import Response
from drf_spectacular.utils import OpenApiParameter, extend_schema

from apps.reporting.dashboard import get_dashboard_stats, get_dashboard_summary, get_recent_activity


class DashboardSummaryView(APIView):
    """GET /api/v1/dashboard/summary/"""

    @extend_schema(
        tags=['dashboard'],
        summary='Get dashboard summary',
        description='Entity counts, money totals, payment status split and top buyers in a single call.',
    )
    def get(self, request):
        return Response({
            'status': 'success',
            'message': 'Dashboard summary fetched successfully',
            'data': get_dashboard_summary(),
        })


class RecentActivityView(APIView):
    """GET /api/v1/dashboard/activity/"""

    @extend_schema(
        tags=['dashboard'],
        summary='Recent transactions, flocks and farms',
        parameters=[OpenApiParameter('limit', int, description='Transactions to return (default 10, max 50)')],
    )
    def get(self, request):
        return Response({
            'status': 'success',
            'message': 'Recent activity fetched successfully',
            'data': get_recent_activity(request.query_params.get('limit')),
        })


class DashboardStatsView(APIView):
    """GET /api/v1/dashboard/stats/"""

    @extend_schema(tags=['dashboard'], summary='This month against last month')
    def get(self, request):
        return Response({
            'status': 'success',
            'message': 'Dashboard stats fetched successfully',
            'data': get_dashboard_stats(),
        })
