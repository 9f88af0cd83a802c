"""
Subscriber store and token tests.
"""

from datetime import datetime

import pytest

from meetup_newsletter.core.errors import Conflict, StoreError
from meetup_newsletter.core.tokens import generate_token, is_valid_token
from meetup_newsletter.modules.subscribers.store import SubscriberStore


# ---------------------------------------------------------------------------
# 1. Tokens
# ---------------------------------------------------------------------------

def test_generated_tokens_are_uuid_shaped_and_distinct():
    tokens = {generate_token() for _ in range(100)}
    assert len(tokens) == 100
    assert all(is_valid_token(token) for token in tokens)


def test_token_validation_is_case_insensitive_and_strict():
    assert is_valid_token('123E4567-E89B-42D3-A456-426614174000')
    assert not is_valid_token('not-a-uuid')
    assert not is_valid_token('123e4567e89b42d3a456426614174000'), "hyphens are required"
    assert not is_valid_token('123e4567-e89b-42d3-a456-426614174000 ')
    assert not is_valid_token('123e4567-e89b-42d3-a456-426614174000\n'), "no trailing newline"
    assert not is_valid_token(None)
    assert not is_valid_token('')


# ---------------------------------------------------------------------------
# 2. Store operations
# ---------------------------------------------------------------------------

def test_insert_and_lookup(app):
    token = generate_token()
    with app.app_context():
        created = SubscriberStore.insert('someone@example.com', token)

        assert created.id is not None
        assert SubscriberStore.find_by_email('someone@example.com').id == created.id
        assert SubscriberStore.find_by_token(token).id == created.id
        assert SubscriberStore.find_by_email('SOMEONE@example.com') is None, "lookups are exact"


def test_duplicate_email_is_conflict(app):
    with app.app_context():
        SubscriberStore.insert('dup@example.com', generate_token())
        with pytest.raises(Conflict):
            SubscriberStore.insert('dup@example.com', generate_token())
        assert SubscriberStore.count() == 1


def test_duplicate_token_is_conflict(app):
    token = generate_token()
    with app.app_context():
        SubscriberStore.insert('one@example.com', token)
        with pytest.raises(Conflict):
            SubscriberStore.insert('two@example.com', token)


def test_update_token_replaces_old_token(app):
    old, new = generate_token(), generate_token()
    with app.app_context():
        subscriber = SubscriberStore.insert('rotate@example.com', old)
        SubscriberStore.update_token(subscriber.id, new)

        assert SubscriberStore.find_by_token(old) is None
        assert SubscriberStore.find_by_token(new).email == 'rotate@example.com'


def test_update_token_collision_is_store_error(app):
    taken = generate_token()
    with app.app_context():
        SubscriberStore.insert('holder@example.com', taken)
        other = SubscriberStore.insert('other@example.com', generate_token())

        with pytest.raises(StoreError):
            SubscriberStore.update_token(other.id, taken)

        assert SubscriberStore.find_by_token(taken).email == 'holder@example.com'


def test_mark_verified_stamps_only_once(app):
    first_stamp = datetime(2025, 1, 15, 18, 30)
    with app.app_context():
        subscriber = SubscriberStore.insert('twice@example.com', generate_token())

        assert SubscriberStore.mark_verified(subscriber.id, first_stamp) == 1
        assert SubscriberStore.mark_verified(subscriber.id, datetime(2025, 2, 1)) == 0

        assert SubscriberStore.find_by_email('twice@example.com').verified_at == first_stamp


def test_mark_verified_and_list_verified(app):
    stamp = datetime(2025, 1, 15, 18, 30)
    with app.app_context():
        first = SubscriberStore.insert('first@example.com', generate_token())
        SubscriberStore.insert('pending@example.com', generate_token())
        third = SubscriberStore.insert('third@example.com', generate_token())

        SubscriberStore.mark_verified(third.id, stamp)
        SubscriberStore.mark_verified(first.id, stamp)

        verified = SubscriberStore.list_verified()
        assert [s.email for s in verified] == ['first@example.com', 'third@example.com']
        assert all(s.verified_at == stamp for s in verified)
        assert SubscriberStore.count(verified=True) == 2
        assert SubscriberStore.count(verified=False) == 1


def test_delete_by_id_is_hard_delete(app):
    with app.app_context():
        subscriber = SubscriberStore.insert('gone@example.com', generate_token())
        assert SubscriberStore.delete_by_id(subscriber.id) == 1
        assert SubscriberStore.find_by_email('gone@example.com') is None
        assert SubscriberStore.delete_by_id(subscriber.id) == 0

        # The address can be used again as a brand-new record
        again = SubscriberStore.insert('gone@example.com', generate_token())
        assert again.verified is False
