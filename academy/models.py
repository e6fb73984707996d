from django.db import models
from django.contrib.auth.models import User
from django.utils import timezone


class Profile(models.Model):
    """Platform-specific fields that sit next to the auth user"""
    ROLE_CHOICES = [
        ('student', 'Student'),
        ('member', 'Member'),
        ('both', 'Member + Master'),
        ('free', 'Free'),
        ('master', 'Master'),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='student')
    master_cohort = models.CharField(max_length=100, blank=True, help_text="e.g., 'Cohort 3'")

    class Meta:
        ordering = ['-user__date_joined']

    def __str__(self):
        return f"{self.user.email or self.user.username} ({self.role})"

    @property
    def is_admin(self):
        return self.user.is_staff


class Program(models.Model):
    slug = models.SlugField(unique=True)
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    has_common_course = models.BooleanField(default=False, help_text="Has lectures open to every visitor")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.title

    def get_lecture_count(self):
        return self.lectures.count()

    def to_dict(self):
        return {
            'id': self.id,
            'slug': self.slug,
            'title': self.title,
            'description': self.description,
            'has_common_course': self.has_common_course,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class Lecture(models.Model):
    LEVEL_MEMBER = 'member'
    LEVEL_MASTER = 'master'
    LEVEL_MASTER_COMMON = 'master_common'
    LEVEL_CHOICES = [
        (LEVEL_MEMBER, 'Member'),
        (LEVEL_MASTER, 'Master Only'),
        (LEVEL_MASTER_COMMON, 'Common'),
    ]

    program = models.ForeignKey(Program, on_delete=models.CASCADE, related_name='lectures')
    title = models.CharField(max_length=200)
    content = models.TextField(blank=True)
    category = models.CharField(max_length=100, blank=True)
    level = models.CharField(max_length=20, choices=LEVEL_CHOICES, default=LEVEL_MEMBER)
    order = models.IntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['order', 'id']

    def __str__(self):
        return f"{self.program.title} - {self.title}"

    def get_level_badge(self):
        """Badge text shown next to non-member lectures"""
        if self.level == self.LEVEL_MEMBER:
            return ""
        return "Common" if self.level == self.LEVEL_MASTER_COMMON else "Master Only"

    def to_dict(self):
        return {
            'id': self.id,
            'program_id': self.program_id,
            'title': self.title,
            'content': self.content,
            'category': self.category,
            'level': self.level,
            'order': self.order,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class LectureProgress(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='lecture_progress')
    lecture = models.ForeignKey(Lecture, on_delete=models.CASCADE, related_name='progress')
    completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)
    last_accessed = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ['user', 'lecture']
        ordering = ['-last_accessed']

    def __str__(self):
        return f"{self.user.username} - {self.lecture.title}"

    def mark_completed(self):
        self.completed = True
        if not self.completed_at:
            self.completed_at = timezone.now()
        self.save()


class Post(models.Model):
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('published', 'Published'),
    ]

    slug = models.SlugField(max_length=200, unique=True)
    title = models.CharField(max_length=200)
    content = models.TextField()
    excerpt = models.CharField(max_length=300, blank=True)
    author = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='posts')
    tags = models.JSONField(default=list, blank=True, help_text="List of tag strings")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft')
    featured_image = models.CharField(max_length=300, blank=True)
    views = models.IntegerField(default=0)
    published_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-published_at', '-created_at']

    def __str__(self):
        return self.title

    def get_tags_list(self):
        if isinstance(self.tags, list):
            return self.tags
        return []


class Review(models.Model):
    author = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='reviews')
    program = models.ForeignKey(Program, on_delete=models.SET_NULL, null=True, blank=True, related_name='reviews')
    rating = models.IntegerField(null=True, blank=True, help_text="1-5 stars")
    text = models.TextField()
    likes = models.JSONField(default=list, blank=True, help_text="User ids (as strings) that liked this review")
    featured = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-featured', '-created_at']

    def __str__(self):
        author = self.author.email if self.author else 'Anonymous'
        return f"{author}: {self.text[:40]}"

    def get_likes_count(self):
        return len(self.likes or [])


class WaitlistEntry(models.Model):
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('contacted', 'Contacted'),
    ]

    email = models.EmailField()
    name = models.CharField(max_length=200, blank=True)
    program_slug = models.SlugField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        unique_together = ['email', 'program_slug']
        verbose_name_plural = 'waitlist entries'

    def __str__(self):
        return f"{self.email} - {self.program_slug}"
