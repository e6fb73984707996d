from django.contrib import admin
from django.urls import path
from django.conf import settings
from django.conf.urls.static import static
from academy import views
from academy import dashboard_views
from academy import api_views

urlpatterns = [
    # Public-facing URLs
    path('', views.home, name='home'),
    path('login/', views.login_view, name='login'),
    path('signup/', views.signup_view, name='signup'),
    path('logout/', views.logout_view, name='logout'),
    path('profile/', views.profile, name='profile'),
    path('programs/', views.programs, name='programs'),
    path('programs/<slug:program_slug>/', views.program_detail, name='program_detail'),
    path('programs/<slug:program_slug>/waitlist/', views.join_waitlist_view, name='join_waitlist'),
    path('lectures/<int:lecture_id>/', views.lecture_detail, name='lecture_detail'),
    path('insights/', views.insights_list, name='insights'),
    path('insights/<slug:post_slug>/', views.post_detail, name='post_detail'),
    path('reviews/', views.reviews, name='reviews'),
    path('reviews/<int:review_id>/like/', views.review_like, name='review_like'),

    # Dashboard URLs (staff only)
    path('dashboard/', dashboard_views.dashboard_home, name='dashboard_home'),
    path('dashboard/users/', dashboard_views.dashboard_users, name='dashboard_users'),
    path('dashboard/users/<int:user_id>/toggle-admin/', dashboard_views.dashboard_toggle_admin, name='dashboard_toggle_admin'),
    path('dashboard/users/<int:user_id>/delete/', dashboard_views.dashboard_delete_user, name='dashboard_delete_user'),
    path('dashboard/programs/', dashboard_views.dashboard_programs, name='dashboard_programs'),
    path('dashboard/programs/add/', dashboard_views.dashboard_add_program, name='dashboard_add_program'),
    path('dashboard/programs/<int:program_id>/edit/', dashboard_views.dashboard_edit_program, name='dashboard_edit_program'),
    path('dashboard/programs/<int:program_id>/delete/', dashboard_views.dashboard_delete_program, name='dashboard_delete_program'),
    path('dashboard/lectures/', dashboard_views.dashboard_lectures, name='dashboard_lectures'),
    path('dashboard/lectures/add/', dashboard_views.dashboard_add_lecture, name='dashboard_add_lecture'),
    path('dashboard/lectures/<int:lecture_id>/edit/', dashboard_views.dashboard_edit_lecture, name='dashboard_edit_lecture'),
    path('dashboard/lectures/<int:lecture_id>/delete/', dashboard_views.dashboard_delete_lecture, name='dashboard_delete_lecture'),
    path('dashboard/waitlist/', dashboard_views.dashboard_waitlist, name='dashboard_waitlist'),
    path('dashboard/waitlist/<int:entry_id>/contacted/', dashboard_views.dashboard_waitlist_contacted, name='dashboard_waitlist_contacted'),

    # JSON API - lectures
    path('api/lectures', api_views.lectures_collection, name='api_lectures'),
    path('api/lectures/stats', api_views.lecture_stats, name='api_lecture_stats'),
    path('api/lectures/<int:lecture_id>', api_views.lecture_item, name='api_lecture'),
    path('api/lectures/<int:lecture_id>/complete', api_views.lecture_complete, name='api_lecture_complete'),
    path('api/lectures/<int:lecture_id>/progress', api_views.lecture_progress, name='api_lecture_progress'),

    # JSON API - programs
    path('api/programs', api_views.programs_collection, name='api_programs'),
    path('api/programs/stats', api_views.program_stats, name='api_program_stats'),
    path('api/programs/<int:program_id>', api_views.program_item, name='api_program'),
    path('api/programs/<int:program_id>/lectures', api_views.program_lectures, name='api_program_lectures'),
    path('api/programs/slug/<slug:slug>', api_views.program_by_slug, name='api_program_by_slug'),
    path('api/programs/slug/<slug:slug>/lectures', api_views.program_lectures_by_slug, name='api_program_lectures_by_slug'),

    # Admin (optional - can be removed if not needed)
    path('admin/', admin.site.urls),
]

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
