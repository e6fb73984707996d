"""
Tests for the insight (blog post) service (academy.utils.insights).
"""
from datetime import timedelta

import pytest
from django.utils import timezone

from academy.exceptions import NotFound, ValidationError
from academy.models import Post
from academy.utils import insights

pytestmark = pytest.mark.django_db


@pytest.fixture
def posts(staff_user):
    now = timezone.now()
    created = []
    for days_ago, slug, tags in [(5, 'older', ['Writing']), (1, 'newest', ['React', 'Frontend']), (3, 'middle', [])]:
        created.append(Post.objects.create(
            slug=slug,
            title=f'{slug.title()} post',
            content=f'Content of the {slug} post',
            excerpt=f'{slug} excerpt',
            author=staff_user,
            tags=tags,
            status='published',
            published_at=now - timedelta(days=days_ago),
        ))
    Post.objects.create(slug='draft', title='Draft post', content='Not yet', status='draft')
    return created


def test_published_posts_newest_first_without_drafts(posts):
    assert [p.slug for p in insights.get_published_posts()] == ['newest', 'middle', 'older']


def test_get_post_by_slug_hides_drafts(posts):
    assert insights.get_post_by_slug('middle').title == 'Middle post'
    with pytest.raises(NotFound):
        insights.get_post_by_slug('draft')
    with pytest.raises(NotFound):
        insights.get_post_by_slug('nope')


def test_get_post_by_id(posts):
    assert insights.get_post(posts[0].id).slug == 'older'
    with pytest.raises(NotFound):
        insights.get_post(99999)


def test_search_posts_covers_tags_and_excerpt(posts):
    assert [p.slug for p in insights.search_posts('frontend')] == ['newest']
    assert [p.slug for p in insights.search_posts('middle excerpt')] == ['middle']
    assert insights.search_posts('not yet') == []


def test_related_posts_exclude_current(posts):
    newest = insights.get_post_by_slug('newest')
    assert [p.slug for p in insights.related_posts(newest)] == ['middle', 'older']
    assert len(insights.related_posts(newest, limit=1)) == 1


def test_create_post_published_sets_publish_date(staff_user):
    post = insights.create_post({
        'title': 'Hello World',
        'content': 'First!',
        'tags': 'News, Launch ,',
        'status': 'published',
    }, author=staff_user)

    assert post.slug == 'hello-world'
    assert post.tags == ['News', 'Launch']
    assert post.published_at is not None
    assert post.author == staff_user


def test_create_post_draft_has_no_publish_date():
    post = insights.create_post({'title': 'Later', 'content': 'Soon'})
    assert post.status == 'draft'
    assert post.published_at is None


def test_create_post_validation(posts):
    with pytest.raises(ValidationError, match='required'):
        insights.create_post({'title': 'No content'})
    with pytest.raises(ValidationError, match='already exists'):
        insights.create_post({'title': 'Dup', 'slug': 'older', 'content': 'x'})
    with pytest.raises(ValidationError, match='must be a string'):
        insights.create_post({'title': 'Numbers', 'content': 42})


def test_update_post_publishes_draft():
    post = insights.create_post({'title': 'Later', 'content': 'Soon'})
    insights.update_post(post, {'status': 'published', 'tags': ['A']})
    post.refresh_from_db()
    assert post.status == 'published'
    assert post.published_at is not None
    assert post.tags == ['A']


def test_delete_post(posts):
    insights.delete_post(posts[0])
    assert not Post.objects.filter(slug='older').exists()
