from django.contrib import admin
from .models import (
    Profile, Program, Lecture, LectureProgress, Post, Review, WaitlistEntry
)


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'role', 'master_cohort', 'is_admin', 'date_joined']
    list_filter = ['role', 'master_cohort']
    search_fields = ['user__email', 'user__username', 'master_cohort']
    raw_id_fields = ['user']

    @admin.display(boolean=True, description='Admin')
    def is_admin(self, obj):
        return obj.user.is_staff

    def date_joined(self, obj):
        return obj.user.date_joined
    date_joined.admin_order_field = 'user__date_joined'


class LectureInline(admin.TabularInline):
    model = Lecture
    extra = 0
    fields = ['title', 'category', 'level', 'order']
    ordering = ['order', 'id']


@admin.register(Program)
class ProgramAdmin(admin.ModelAdmin):
    list_display = ['title', 'slug', 'has_common_course', 'lecture_count', 'created_at']
    list_filter = ['has_common_course']
    search_fields = ['title', 'description', 'slug']
    prepopulated_fields = {'slug': ('title',)}
    inlines = [LectureInline]

    def lecture_count(self, obj):
        return obj.get_lecture_count()
    lecture_count.short_description = 'Lectures'


@admin.register(Lecture)
class LectureAdmin(admin.ModelAdmin):
    list_display = ['title', 'program', 'category', 'level', 'order']
    list_filter = ['program', 'level', 'category']
    search_fields = ['title', 'content', 'category']
    ordering = ['program', 'order']
    fieldsets = (
        ('Basic Information', {
            'fields': ('program', 'title', 'category', 'order')
        }),
        ('Access', {
            'fields': ('level',)
        }),
        ('Content', {
            'fields': ('content',)
        }),
    )


@admin.register(LectureProgress)
class LectureProgressAdmin(admin.ModelAdmin):
    list_display = ['user', 'lecture', 'completed', 'completed_at', 'last_accessed']
    list_filter = ['completed', 'lecture__program']
    search_fields = ['user__email', 'lecture__title']
    readonly_fields = ['last_accessed']


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ['title', 'author', 'status', 'views', 'published_at', 'created_at']
    list_filter = ['status', 'published_at']
    search_fields = ['title', 'content', 'excerpt']
    prepopulated_fields = {'slug': ('title',)}
    readonly_fields = ['views', 'created_at', 'updated_at']
    fieldsets = (
        ('Basic Information', {
            'fields': ('title', 'slug', 'author', 'status', 'published_at')
        }),
        ('Content', {
            'fields': ('excerpt', 'content', 'tags', 'featured_image')
        }),
        ('Stats', {
            'fields': ('views', 'created_at', 'updated_at')
        }),
    )


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ['author', 'program', 'rating', 'featured', 'likes_count', 'created_at']
    list_filter = ['featured', 'rating', 'program']
    search_fields = ['text', 'author__email']
    list_editable = ['featured']

    def likes_count(self, obj):
        return obj.get_likes_count()
    likes_count.short_description = 'Likes'


@admin.register(WaitlistEntry)
class WaitlistEntryAdmin(admin.ModelAdmin):
    list_display = ['email', 'name', 'program_slug', 'status', 'created_at']
    list_filter = ['program_slug', 'status']
    search_fields = ['email', 'name']
    actions = ['mark_as_contacted']

    def mark_as_contacted(self, request, queryset):
        updated = queryset.update(status='contacted')
        self.message_user(request, f'{updated} entries marked as contacted.')
    mark_as_contacted.short_description = 'Mark selected entries as contacted'
