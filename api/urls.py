# api/urls.py
from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from accounts.views import LoginView
from . import views

router = DefaultRouter()
router.register(r'blood-requests', views.BloodRequestViewSet, basename='blood-request')
router.register(r'matches', views.MatchViewSet, basename='match')
router.register(r'donors', views.DonorViewSet, basename='donor')
router.register(r'notifications', views.NotificationViewSet, basename='notification')

app_name = 'api'

urlpatterns = [
    path('token/', LoginView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('accounts/', include('accounts.urls')),
    path('', include(router.urls)),
]

# POST /api/token/                              - JWT pair (username or email)
# POST /api/accounts/register/                  - Register donor / requester
#
# /api/blood-requests/                          - Own blood requests (CRUD)
# POST /api/blood-requests/{id}/match/          - Search donors and create matches
# GET|POST /api/blood-requests/{id}/matches/    - Matches with donor details / match chosen donors
# POST /api/blood-requests/{id}/cancel/         - Close the request
#
# GET  /api/matches/                            - Own matches (filters + sort)
# GET  /api/matches/{id}/                       - One match, from the viewer's side
# POST /api/matches/{id}/accept|decline|complete|cancel/
# GET  /api/matches/statistics/
#
# GET|PATCH /api/donors/me/, GET /api/donors/me/history/, GET /api/donors/me/stats/
#
# /api/notifications/, POST {id}/read/, POST read-all/, GET stats/
