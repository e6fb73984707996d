"""
Insight (blog post) helpers
"""
import logging

from django.utils import timezone
from django.utils.text import slugify

from ..exceptions import NotFound, ValidationError
from ..models import Post
from .catalog import text_field
from .search import filter_by_search, newest_first

logger = logging.getLogger(__name__)

POST_SEARCH_FIELDS = ('title', 'content', 'excerpt', 'tags')


def get_published_posts():
    """Published posts, newest first by publish date (falls back to creation date)"""
    posts = Post.objects.filter(status='published').select_related('author')
    return newest_first(posts, 'published_at', 'created_at')


def get_post(post_id):
    try:
        return Post.objects.select_related('author').get(id=post_id)
    except (Post.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"Post not found: {post_id}")


def get_post_by_slug(slug):
    try:
        return Post.objects.select_related('author').get(slug=slug, status='published')
    except Post.DoesNotExist:
        raise NotFound(f"Post not found: {slug}")


def search_posts(term):
    return filter_by_search(get_published_posts(), term, POST_SEARCH_FIELDS)


def related_posts(post, limit=3):
    return [p for p in get_published_posts() if p.id != post.id][:limit]


def _clean_tags(tags):
    if isinstance(tags, str):
        tags = tags.split(',')
    return [tag.strip() for tag in (tags or []) if tag and tag.strip()]


def create_post(data, author=None):
    title = text_field(data, 'title')
    content = text_field(data, 'content')
    if not title or not content:
        raise ValidationError("Post title and content are required.")

    slug = slugify(text_field(data, 'slug') or title)
    if Post.objects.filter(slug=slug).exists():
        raise ValidationError(f'A post with slug "{slug}" already exists.')

    status = data.get('status') or 'draft'
    post = Post.objects.create(
        slug=slug,
        title=title,
        content=content,
        excerpt=text_field(data, 'excerpt'),
        author=author,
        tags=_clean_tags(data.get('tags')),
        status=status,
        featured_image=data.get('featured_image') or '',
        published_at=timezone.now() if status == 'published' else None,
    )
    logger.info("Post created: %s", post.slug)
    return post


def update_post(post, data):
    for field in ('title', 'content', 'excerpt', 'featured_image'):
        if data.get(field) is not None:
            setattr(post, field, data[field])
    if data.get('tags') is not None:
        post.tags = _clean_tags(data['tags'])
    if data.get('status') is not None:
        post.status = data['status']
        if post.status == 'published' and not post.published_at:
            post.published_at = timezone.now()
    post.save()
    return post


def delete_post(post):
    slug = post.slug
    post.delete()
    logger.info("Post deleted: %s", slug)
