"""Admin delete helper."""

import json

import pytest

from app.models.blog import Blog, BlogPost
from app.services.admin_service import (
    DeleteFailure,
    delete_failure_message,
    delete_loaded_record,
    delete_record,
    handle_delete_failure,
)

pytestmark = pytest.mark.unit

ALERTS = {
    DeleteFailure.CONSTRAINT_VIOLATION: "Blog still has posts",
    DeleteFailure.NOT_FOUND: "No such blog",
}


class TestDeleteFailureMessage:
    def test_single_message_for_every_failure(self):
        for failure in DeleteFailure:
            assert delete_failure_message(failure, "Could not delete") == "Could not delete"

    def test_message_per_failure(self):
        assert delete_failure_message(DeleteFailure.NOT_FOUND, ALERTS) == "No such blog"
        assert delete_failure_message(DeleteFailure.CONSTRAINT_VIOLATION, ALERTS) == "Blog still has posts"


class TestHandleDeleteFailure:
    def test_redirects_with_alert(self):
        response = handle_delete_failure(DeleteFailure.NOT_FOUND, ALERTS, "/admin/blogs")
        body = json.loads(response.body)

        assert response.status_code == 303
        assert response.headers["location"] == "/admin/blogs"
        assert body["alert"] == "No such blog"
        assert body["error_code"] == "NOT_FOUND"
        assert body["success"] is False

    def test_constraint_violation_code(self):
        response = handle_delete_failure(DeleteFailure.CONSTRAINT_VIOLATION, "Nope", "/admin/blogs")
        assert json.loads(response.body)["error_code"] == "CONSTRAINT_VIOLATION"


@pytest.mark.asyncio
class TestDeleteRecord:
    async def test_missing_record(self, session_local):
        async with session_local() as session:
            assert await delete_record(session, Blog, 12345) is DeleteFailure.NOT_FOUND

    async def test_deletes_record(self, session_local, make_user):
        owner = await make_user()
        async with session_local() as session:
            blog = Blog(name="News", slug="news", user_id=owner.id)
            session.add(blog)
            await session.commit()

            assert await delete_loaded_record(session, blog) is None
            assert await session.get(Blog, blog.id) is None

    async def test_blog_with_posts_is_a_constraint_violation(self, session_local, make_user):
        owner = await make_user()
        async with session_local() as session:
            blog = Blog(name="News", slug="news", user_id=owner.id)
            session.add(blog)
            await session.flush()
            session.add(BlogPost(blog_id=blog.id, user_id=owner.id, title="Hi", slug="hi", body="..."))
            await session.commit()
            blog_id = blog.id

            assert await delete_record(session, Blog, blog_id) is DeleteFailure.CONSTRAINT_VIOLATION

        async with session_local() as session:
            assert await session.get(Blog, blog_id) is not None
