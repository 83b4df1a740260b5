"""Name helpers used to turn symbolic subjects into entity type names."""

import pytest

from app.utils.inflection import camelize, classify, singularize, underscore

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("plural", "singular"),
    [
        ("posts", "post"),
        ("blogs", "blog"),
        ("categories", "category"),
        ("boxes", "box"),
        ("people", "person"),
        ("news", "news"),
        ("status", "status"),
    ],
)
def test_singularize(plural, singular):
    assert singularize(plural) == singular


def test_underscore_and_camelize():
    assert underscore("BlogPost") == "blog_post"
    assert underscore("FeatureFlag") == "feature_flag"
    assert camelize("blog_post") == "BlogPost"
    assert camelize("feature-flag") == "FeatureFlag"


@pytest.mark.parametrize(
    ("name", "class_name"),
    [
        ("blog_posts", "BlogPost"),
        ("posts", "Post"),
        ("feature_flags", "FeatureFlag"),
        ("BlogPost", "BlogPost"),
        ("user", "User"),
    ],
)
def test_classify(name, class_name):
    assert classify(name) == class_name
