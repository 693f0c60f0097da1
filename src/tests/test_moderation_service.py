from datetime import timedelta

import pytest

from danke.exceptions import ErrorKind
from danke.models.post import Post
from danke.services.moderation_service import ModerationService
from danke.services.notification_service import NotificationService
from danke.utils import utcnow

from conftest import doc


@pytest.fixture
def notification_service(notifications_repository):
    return NotificationService(notifications_repository)


@pytest.fixture
def moderation_service(posts_repository, boards_repository, notification_service):
    return ModerationService(posts_repository, boards_repository, notification_service)


@pytest.fixture
def pending_post(posts_repository, moderated_board, member):
    return posts_repository.create_post(
        Post(board_id=moderated_board.id, creator_id=member.id, content=doc("Good luck Grace"),
             moderation_status="pending")
    )


def test_approve_notifies_author(moderation_service, notification_service, pending_post, creator, member):
    result, post = moderation_service.approve(pending_post.id, creator.id)

    assert result.is_ok
    assert post.moderation_status == "approved"
    assert post.moderated_by == creator.id

    notifications = notification_service.get_user_notifications(member.id)
    assert len(notifications) == 1
    assert notifications[0].type == "post_approved"
    assert notifications[0].title == "Post Approved"
    assert notifications[0].post_id == pending_post.id
    assert notification_service.get_unread_count(member.id) == 1


def test_request_change_sends_rejection_with_reason(moderation_service, notification_service,
                                                    pending_post, creator, member):
    result, post = moderation_service.request_change(pending_post.id, creator.id, reason="Add a greeting")

    assert result.is_ok
    assert post.moderation_status == "changes-requested"
    notification = notification_service.get_user_notifications(member.id)[0]
    assert notification.type == "post_rejected"
    assert notification.message.endswith(": Add a greeting")


def test_schedule_deletion_sends_nothing(moderation_service, notification_service, pending_post, creator, member):
    result, post = moderation_service.schedule_deletion(
        pending_post.id, creator.id, delete_date=utcnow() + timedelta(days=1)
    )

    assert result.is_ok
    assert post.moderation_status == "deletion-scheduled"
    assert post.delete_scheduled_by == creator.id
    assert notification_service.get_user_notifications(member.id) == []


def test_appointed_moderator_deletes_post(moderation_service, moderators_repository, posts_repository,
                                          notification_service, moderated_board, pending_post,
                                          creator, outsider, member):
    moderators_repository.add_moderator(moderated_board.id, outsider.email, added_by=creator.id)

    result, post = moderation_service.delete(pending_post.id, outsider.id, reason="Duplicate")

    assert result.is_ok
    assert post.is_deleted
    assert post.moderation_status == "deleted"
    assert posts_repository.get_post(pending_post.id) is None
    assert notification_service.get_user_notifications(member.id)[0].type == "post_hidden"


def test_second_delete_is_silent(moderation_service, notification_service, pending_post, creator, member):
    moderation_service.delete(pending_post.id, creator.id)
    result, post = moderation_service.delete(pending_post.id, creator.id)

    assert result.is_ok
    assert result.value.is_noop
    assert len(notification_service.get_user_notifications(member.id)) == 1


def test_non_moderator_is_refused_and_nothing_changes(moderation_service, posts_repository,
                                                      notification_service, pending_post, member):
    result, _ = moderation_service.approve(pending_post.id, member.id)

    assert not result.is_ok
    assert result.error.kind == ErrorKind.FORBIDDEN
    assert posts_repository.get_post(pending_post.id).moderation_status == "pending"
    assert notification_service.get_user_notifications(member.id) == []


def test_removed_moderator_loses_rights_immediately(moderation_service, moderators_repository,
                                                    moderated_board, pending_post, creator, outsider):
    moderators_repository.add_moderator(moderated_board.id, outsider.email, added_by=creator.id)
    moderators_repository.remove_moderator(moderated_board.id, outsider.id, removed_by=creator.id)

    result, _ = moderation_service.approve(pending_post.id, outsider.id)
    assert result.error.kind == ErrorKind.FORBIDDEN


def test_unknown_post(moderation_service, creator):
    result, post = moderation_service.approve("missing", creator.id)
    assert post is None
    assert result.error.kind == ErrorKind.NOT_FOUND


def test_process_scheduled_deletions(moderation_service, posts_repository, pending_post, creator):
    now = utcnow()
    moderation_service.schedule_deletion(pending_post.id, creator.id, delete_date=now + timedelta(hours=1))

    assert moderation_service.process_scheduled_deletions(now) == []
    assert moderation_service.process_scheduled_deletions(now + timedelta(hours=2)) == [pending_post.id]

    post = posts_repository.get_post(pending_post.id, include_deleted=True)
    assert post.is_deleted
    assert post.moderation_status == "deleted"


def test_scheduled_post_still_counts_toward_cap(moderation_service, posts_repository, pending_post,
                                                moderated_board, creator, member):
    moderation_service.schedule_deletion(pending_post.id, creator.id, delete_date=utcnow() + timedelta(days=1))
    assert posts_repository.count_active_posts(moderated_board.id, member.id) == 1


def test_mark_notifications_read(moderation_service, notification_service, pending_post, creator, member, outsider):
    moderation_service.approve(pending_post.id, creator.id)
    moderation_service.request_change(pending_post.id, creator.id, reason="One more thing")
    notifications = notification_service.get_user_notifications(member.id)

    assert not notification_service.mark_as_read(notifications[0].id, outsider.id)
    assert notification_service.mark_as_read(notifications[0].id, member.id)
    assert notification_service.get_unread_count(member.id) == 1
    assert notification_service.mark_all_as_read(member.id) == 1
    assert notification_service.get_unread_count(member.id) == 0
