from datetime import timedelta

import pytest

from danke.exceptions import BoardNotFoundException, ForbiddenException, ValidationException
from danke.models.board import BoardBasicCreate, BoardCreate, BoardUpdate
from danke.repositories.boards_repository import BoardsRepository
from danke.utils import utcnow


def test_full_configuration_is_stored(boards_repository, creator):
    board = boards_repository.create_board(
        BoardCreate(
            title="Happy birthday",
            recipient_name="Ada",
            board_type="birthday",
            posting_mode="multiple",
            max_posts_per_user="3",
            board_visibility="private",
            allowed_domains=[" ACME.com", "acme.com"],
            type_config={"birthdayDate": "2026-12-10", "backgroundColor": "#FFAA00"},
        ),
        creator_id=creator.id,
    )
    assert board.board_type == "birthday"
    assert board.board_visibility == "private"
    assert board.max_posts_per_user == "3"
    assert board.allowed_domains == ["acme.com"]
    assert board.view_token != board.post_token


def test_multi_step_flag_off_uses_defaults(engine, creator):
    repository = BoardsRepository(engine, multi_step_boards=False)
    board = repository.create_board(
        BoardCreate(title="Plain", recipient_name="Ada", board_visibility="private", moderation_enabled=True),
        creator_id=creator.id,
    )
    assert board.board_visibility == "public"
    assert not board.moderation_enabled

    basic = repository.create_board(BoardBasicCreate(title="Basic", recipient_name="Ada"), creator_id=creator.id)
    assert basic.posting_mode == "multiple"


def test_invalid_type_config(boards_repository, creator):
    with pytest.raises(ValidationException) as e:
        boards_repository.create_board(
            BoardCreate(
                title="Thanks",
                recipient_name="Ada",
                board_type="appreciation",
                type_config={"appreciationTheme": "gloomy"},
            ),
            creator_id=creator.id,
        )
    assert e.value.message == "Invalid type configuration - Invalid appreciation theme"


def test_max_posts_must_be_a_positive_number():
    with pytest.raises(ValueError):
        BoardCreate(title="Thanks", recipient_name="Ada", max_posts_per_user="0")
    with pytest.raises(ValueError):
        BoardCreate(title="Thanks", recipient_name="Ada", max_posts_per_user="many")


def test_lookup_by_reference(boards_repository, board):
    assert boards_repository.get_board_by_ref(board.id).id == board.id
    assert boards_repository.get_board_by_ref(board.view_token).id == board.id
    assert boards_repository.get_board_by_post_token(board.post_token).id == board.id
    assert boards_repository.get_board_by_ref(board.post_token) is None


def test_update_rules(boards_repository, board, creator, member):
    with pytest.raises(ForbiddenException):
        boards_repository.update_board(board.id, BoardUpdate(title="Mine now"), user_id=member.id)
    with pytest.raises(BoardNotFoundException):
        boards_repository.update_board("missing", BoardUpdate(title="x"), user_id=creator.id)

    with pytest.raises(ValidationException):
        boards_repository.update_board(
            board.id, BoardUpdate(posting_mode="single", max_posts_per_user="2"), user_id=creator.id
        )
    with pytest.raises(ValidationException):
        boards_repository.update_board(
            board.id, BoardUpdate(expiration_date=utcnow() - timedelta(days=1)), user_id=creator.id
        )

    updated = boards_repository.update_board(
        board.id, BoardUpdate(moderation_enabled=True, allowed_emails=[]), user_id=creator.id
    )
    assert updated.moderation_enabled
    assert updated.allowed_emails is None
    assert updated.title == board.title


def test_boards_by_creator(boards_repository, board, creator, member):
    assert [b.id for b in boards_repository.get_boards_by_creator(creator.id)] == [board.id]
    assert boards_repository.get_boards_by_creator(member.id) == []
