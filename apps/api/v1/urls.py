# apps/api/v1/urls.py
"""
URL routing for API v1.

All API endpoints are mounted under /api/v1/
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
    TokenVerifyView,
)

from .views.buyers import BuyerViewSet
from .views.farms import FarmViewSet, FlockViewSet, ShedViewSet
from .views.health import health_check
from .views.ledger import LedgerViewSet
from .views.dashboard import DashboardStatsView, DashboardSummaryView, RecentActivityView
from .views.reporting import (
    BuyerUnifiedReportView, EntityDailyReportView, EntityOverallReportView, UniversalReportView,
)

# Create router and register viewsets
router = DefaultRouter()

# Farms
router.register(r'farms', FarmViewSet, basename='farm')
router.register(r'flocks', FlockViewSet, basename='flock')
router.register(r'sheds', ShedViewSet, basename='shed')

# Buyers
router.register(r'buyers', BuyerViewSet, basename='buyer')

# Ledger
router.register(r'ledgers', LedgerViewSet, basename='ledger')

urlpatterns = [
    # Health check (no auth)
    path('health/', health_check, name='health-check'),

    # JWT Authentication
    path('auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('auth/token/verify/', TokenVerifyView.as_view(), name='token_verify'),

    # Reports
    path('reports/universal/', UniversalReportView.as_view(), name='universal-report'),
    path('reports/buyer/<str:entity_id>/daily/<str:day>/', EntityDailyReportView.as_view(entity='buyer'), name='buyer-daily-report'),
    path('reports/buyer/<str:entity_id>/overall/', EntityOverallReportView.as_view(entity='buyer'), name='buyer-overall-report'),
    path('reports/buyer/<str:entity_id>/unified/', BuyerUnifiedReportView.as_view(), name='buyer-unified-report'),
    path('reports/farm/<str:entity_id>/daily/<str:day>/', EntityDailyReportView.as_view(entity='farm'), name='farm-daily-report'),
    path('reports/farm/<str:entity_id>/overall/', EntityOverallReportView.as_view(entity='farm'), name='farm-overall-report'),
    path('reports/flock/<str:entity_id>/daily/<str:day>/', EntityDailyReportView.as_view(entity='flock'), name='flock-daily-report'),
    path('reports/flock/<str:entity_id>/overall/', EntityOverallReportView.as_view(entity='flock'), name='flock-overall-report'),
    path('reports/shed/<str:entity_id>/daily/<str:day>/', EntityDailyReportView.as_view(entity='shed'), name='shed-daily-report'),
    path('reports/shed/<str:entity_id>/overall/', EntityOverallReportView.as_view(entity='shed'), name='shed-overall-report'),

    # Dashboard
    path('dashboard/summary/', DashboardSummaryView.as_view(), name='dashboard-summary'),
    path('dashboard/activity/', RecentActivityView.as_view(), name='dashboard-activity'),
    path('dashboard/stats/', DashboardStatsView.as_view(), name='dashboard-stats'),

    # Router URLs
    path('', include(router.urls)),
]
