"""
Review helpers: likes, ordering, stats
"""
import logging

from ..exceptions import ValidationError
from ..models import Review

logger = logging.getLogger(__name__)


def toggle_like(likes, user_id):
    """
    Add user_id to likes if absent, remove it if present.
    Ids are compared as strings. Returns a new list; the input is left alone.
    """
    user_key = str(user_id)
    current = list(likes or [])
    if user_key in current:
        return [like for like in current if like != user_key]
    return current + [user_key]


def has_liked(review, user):
    if user is None or not user.is_authenticated:
        return False
    return str(user.id) in (review.likes or [])


def toggle_review_like(review, user):
    """Toggle the user's like on a review and persist it (last write wins)"""
    review.likes = toggle_like(review.likes, user.id)
    review.save(update_fields=['likes', 'updated_at'])
    return review


def sort_reviews(reviews):
    """Featured reviews first, then newest first"""
    by_date = sorted(reviews, key=lambda r: r.created_at, reverse=True)
    return sorted(by_date, key=lambda r: not r.featured)


def split_featured(reviews):
    featured = [r for r in reviews if r.featured]
    regular = [r for r in reviews if not r.featured]
    return featured, regular


def create_review(user, text, rating=None, program=None):
    text = (text or '').strip()
    if not text:
        raise ValidationError("Review text cannot be empty.")

    if rating in ('', None):
        rating = None
    else:
        try:
            rating = int(rating)
        except (TypeError, ValueError):
            raise ValidationError("Rating must be a number between 1 and 5.")
        if rating < 1 or rating > 5:
            raise ValidationError("Rating must be a number between 1 and 5.")

    review = Review.objects.create(
        author=user,
        program=program,
        rating=rating,
        text=text,
        likes=[],
        featured=False,
    )
    logger.info("Review %s created by user %s", review.id, user.id)
    return review


def review_stats(reviews):
    """
    Summarise a set of reviews.
    Returns dict with keys: 'total_reviews', 'average_rating', 'rating_distribution'
    """
    reviews = list(reviews)
    ratings = [r.rating for r in reviews if r.rating is not None]
    distribution = {}
    for rating in ratings:
        distribution[rating] = distribution.get(rating, 0) + 1

    average = round(sum(ratings) / len(ratings), 1) if ratings else 0

    return {
        'total_reviews': len(reviews),
        'average_rating': average,
        'rating_distribution': distribution,
    }
