# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""
Pytest configuration and shared fixtures

Store-backed tests run against mongomock so the real
MongoCollectionStore code paths execute without a server.
"""
import io
import sys
from pathlib import Path

import mongomock
import pytest
from bson import ObjectId

# Add api directory to path for imports
# Detect if running in Docker (./api:/app mount) vs host (./api exists)
api_path = Path(__file__).parent.parent / "api"
if not api_path.exists():
    # Running in Docker where api contents are at /app directly
    api_path = Path(__file__).parent.parent
sys.path.insert(0, str(api_path))


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def mongo_client():
    """In-memory MongoClient"""
    return mongomock.MongoClient()


@pytest.fixture
def mongo_db(mongo_client):
    return mongo_client['nuggets']


@pytest.fixture
def store(mongo_db):
    """MongoCollectionStore over an empty in-memory database"""
    from store.mongo_store import MongoCollectionStore
    return MongoCollectionStore(mongo_db)


class Seeder:
    """Inserts documents shaped like production data and returns string IDs.

    Reference fields hold string IDs; `_id` is an ObjectId.
    """

    def __init__(self, db):
        self.db = db

    def _insert(self, collection, doc):
        doc.setdefault('_id', ObjectId())
        self.db[collection].insert_one(doc)
        return str(doc['_id'])

    def user(self, name='user'):
        return self._insert('users', {'name': name})

    def article(self, author_id, title='Title', content='Content', author_name='Author'):
        doc = {'authorId': author_id}
        if title is not None:
            doc['title'] = title
        if content is not None:
            doc['content'] = content
        if author_name is not None:
            doc['authorName'] = author_name
        return self._insert('articles', doc)

    def collection(self, creator_id, entries=None, followers=None, **extra):
        entries = entries or []
        followers = followers or []
        doc = {
            'name': 'Collection',
            'creatorId': creator_id,
            'entries': entries,
            'followers': followers,
            'followersCount': len(followers),
            'validEntriesCount': len(entries),
        }
        doc.update(extra)
        return self._insert('collections', doc)

    def bookmark(self, user_id, article_id):
        return self._insert('bookmarks', {'userId': user_id, 'nuggetId': article_id})

    def folder(self, user_id, name='Folder'):
        return self._insert('bookmarkfolders', {'userId': user_id, 'name': name})

    def link(self, user_id, bookmark_id, folder_id):
        return self._insert('bookmarkfolderlinks', {
            'userId': user_id, 'bookmarkId': bookmark_id, 'folderId': folder_id,
        })

    def report(self, reporter_id, target_id, target_type='nugget', respondent_id=None, actioned_by=None):
        doc = {'reporter': {'id': reporter_id}, 'targetId': target_id, 'targetType': target_type}
        if respondent_id is not None:
            doc['respondent'] = {'id': respondent_id}
        if actioned_by is not None:
            doc['actionedBy'] = actioned_by
        return self._insert('reports', doc)

    def audit_log(self, report_id, performed_by):
        return self._insert('moderationauditlogs', {'reportId': report_id, 'performedBy': performed_by})

    def feedback(self, user_id=None, text='Nice'):
        doc = {'text': text}
        if user_id is not None:
            doc['user'] = {'id': user_id}
        return self._insert('feedbacks', doc)


@pytest.fixture
def seed(mongo_db):
    """Seeder bound to the in-memory database"""
    return Seeder(mongo_db)


def missing_id():
    """String ID that matches no document"""
    return str(ObjectId())


@pytest.fixture
def dirty_db(seed):
    """Database with one violation of every kind plus valid data around it.

    Returns a dict of the IDs tests assert against.
    """
    alice = seed.user('alice')
    bob = seed.user('bob')
    ghost = missing_id()
    gone_article = missing_id()

    a1 = seed.article(alice)
    a2 = seed.article(bob)
    orphan_authored = seed.article(ghost)
    untitled = seed.article(alice, title=None)

    coll = seed.collection(
        alice,
        entries=[
            {'articleId': a1, 'addedByUserId': alice},
            {'articleId': gone_article, 'addedByUserId': alice},
            {'articleId': a2, 'addedByUserId': ghost},
        ],
        followers=[alice, ghost, bob],
    )
    orphan_creator_coll = seed.collection(ghost, entries=[{'articleId': a1, 'addedByUserId': bob}])

    good_bookmark = seed.bookmark(alice, a1)
    bad_user_bookmark = seed.bookmark(ghost, a1)
    bad_article_bookmark = seed.bookmark(bob, gone_article)

    good_folder = seed.folder(alice)
    bad_folder = seed.folder(ghost)

    good_link = seed.link(alice, good_bookmark, good_folder)
    cascade_bookmark_link = seed.link(bob, bad_article_bookmark, good_folder)
    cascade_folder_link = seed.link(alice, good_bookmark, bad_folder)
    dangling_link = seed.link(alice, missing_id(), good_folder)

    report = seed.report(ghost, gone_article, respondent_id=bob)
    audit = seed.audit_log(missing_id(), ghost)
    feedback = seed.feedback(ghost)

    return {
        'alice': alice, 'bob': bob, 'ghost': ghost, 'gone_article': gone_article,
        'a1': a1, 'a2': a2, 'orphan_authored': orphan_authored, 'untitled': untitled,
        'collection': coll, 'orphan_creator_collection': orphan_creator_coll,
        'good_bookmark': good_bookmark, 'bad_user_bookmark': bad_user_bookmark,
        'bad_article_bookmark': bad_article_bookmark,
        'good_folder': good_folder, 'bad_folder': bad_folder,
        'good_link': good_link, 'cascade_bookmark_link': cascade_bookmark_link,
        'cascade_folder_link': cascade_folder_link, 'dangling_link': dangling_link,
        'report': report, 'audit': audit, 'feedback': feedback,
    }


def snapshot(db):
    """Every document of every collection, for purity assertions"""
    return {
        name: sorted((dict(doc) for doc in db[name].find({})), key=lambda d: str(d['_id']))
        for name in sorted(db.list_collection_names())
    }


# =============================================================================
# Config Fixtures
# =============================================================================

@pytest.fixture
def make_config(tmp_path):
    """Build a Config pointed at tmp_path for reports"""
    from config import Config, DatabaseConfig, SanitizationConfig

    def _make(dry_run=True, force_execute=False, uri="mongodb://localhost:27017/nuggets"):
        return Config(
            database=DatabaseConfig.from_uri(uri),
            sanitization=SanitizationConfig(
                dry_run=dry_run, force_execute=force_execute, report_dir=tmp_path,
            ),
        )
    return _make


@pytest.fixture
def console():
    """Console Logger writing to a buffer; read it with console.output.getvalue()"""
    from services.logger import Logger
    return Logger(output=io.StringIO())


@pytest.fixture
def take_snapshot(mongo_db):
    """Callable returning every document of every collection"""
    return lambda: snapshot(mongo_db)


@pytest.fixture
def new_id():
    """Callable returning an ID that matches no document"""
    return missing_id
