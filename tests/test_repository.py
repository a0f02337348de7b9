import pytest
from bson import ObjectId

from myknowledge.repository import EntityRepository

from tests.conftest import TEST_USER_ID, OTHER_USER_ID


@pytest.fixture
def repo(mongo_manager):
    return EntityRepository(mongo_manager, TEST_USER_ID)


@pytest.fixture
def other_repo(mongo_manager):
    return EntityRepository(mongo_manager, OTHER_USER_ID)


def test_repository_requires_owner(mongo_manager):
    with pytest.raises(ValueError):
        EntityRepository(mongo_manager, "")


# --- Ownership scoping ---

@pytest.mark.asyncio
async def test_notes_of_other_owner_are_invisible(repo, other_repo):
    note = await repo.create_note({"title": "mine", "content": "c"})

    assert await other_repo.list_notes() == []
    assert await other_repo.get_note(str(note["_id"])) is None
    assert await other_repo.update_note(str(note["_id"]), {"title": "hijacked"}) is None
    assert await other_repo.delete_note(str(note["_id"])) is False

    still_there = await repo.get_note(str(note["_id"]))
    assert still_there["title"] == "mine"


@pytest.mark.asyncio
async def test_create_note_forces_owner(repo):
    note = await repo.create_note({"title": "t", "content": "c", "user_id": OTHER_USER_ID})
    assert note["user_id"] == TEST_USER_ID


@pytest.mark.asyncio
async def test_create_note_applies_defaults(repo):
    note = await repo.create_note({"title": "t", "content": "c"})
    assert note["tag_ids"] == []
    assert note["is_pinned"] is False
    assert note["is_journal"] is False
    assert note["date"].endswith("Z")


@pytest.mark.asyncio
async def test_delete_is_idempotent_absence(repo):
    note = await repo.create_note({"title": "t", "content": "c"})
    note_id = str(note["_id"])

    assert await repo.delete_note(note_id) is True
    assert await repo.get_note(note_id) is None
    assert await repo.delete_note(note_id) is False


@pytest.mark.asyncio
async def test_invalid_object_id_is_not_found(repo):
    assert await repo.get_note("not-an-object-id") is None
    assert await repo.update_note("not-an-object-id", {"title": "x"}) is None
    assert await repo.delete_note("not-an-object-id") is False
    assert await repo.update_tag("123", {"name": "x"}) is None
    assert await repo.delete_tag("123") is False


@pytest.mark.asyncio
async def test_update_note_ignores_owner_and_none_values(repo):
    note = await repo.create_note({"title": "t", "content": "c"})
    updated = await repo.update_note(str(note["_id"]), {"title": None, "content": "new", "user_id": OTHER_USER_ID})
    assert updated["title"] == "t"
    assert updated["content"] == "new"
    assert updated["user_id"] == TEST_USER_ID


@pytest.mark.asyncio
async def test_empty_patch_returns_current_note(repo):
    note = await repo.create_note({"title": "t", "content": "c"})
    unchanged = await repo.update_note(str(note["_id"]), {})
    assert unchanged["title"] == "t"
    assert await repo.update_note(str(ObjectId()), {}) is None


# --- Journals ---

@pytest.mark.asyncio
async def test_list_notes_journal_filter(repo):
    await repo.create_note({"title": "plain", "content": "c"})
    await repo.create_note({"title": "entry", "content": "c"}, journal=True)

    assert len(await repo.list_notes()) == 2
    journals = await repo.list_notes(journal_only=True)
    assert [journal["title"] for journal in journals] == ["entry"]


@pytest.mark.asyncio
async def test_journal_create_forces_flag(repo):
    journal = await repo.create_note({"title": "t", "content": "c", "is_journal": False}, journal=True)
    assert journal["is_journal"] is True


@pytest.mark.asyncio
async def test_journal_path_cannot_touch_plain_notes(repo):
    note = await repo.create_note({"title": "plain", "content": "c"})
    note_id = str(note["_id"])

    assert await repo.get_note(note_id, journal_only=True) is None
    assert await repo.update_note(note_id, {"title": "x"}, journal_only=True) is None
    assert await repo.delete_note(note_id, journal_only=True) is False
    assert (await repo.get_note(note_id))["title"] == "plain"


@pytest.mark.asyncio
async def test_journal_update_cannot_clear_flag(repo):
    journal = await repo.create_note({"title": "t", "content": "c"}, journal=True)
    updated = await repo.update_note(str(journal["_id"]), {"is_journal": False, "title": "new"}, journal_only=True)
    assert updated["is_journal"] is True
    assert updated["title"] == "new"


# --- Tags ---

@pytest.mark.asyncio
async def test_create_tag_default_color(repo):
    tag = await repo.create_tag("work")
    assert tag["color"] == "#999"
    assert tag["user_id"] == TEST_USER_ID


@pytest.mark.asyncio
async def test_update_tag_is_partial(repo):
    tag = await repo.create_tag("work", "#00f")
    updated = await repo.update_tag(str(tag["_id"]), {"color": "#fff"})
    assert updated["name"] == "work"
    assert updated["color"] == "#fff"


@pytest.mark.asyncio
async def test_tags_scoped_by_owner(repo, other_repo):
    tag = await repo.create_tag("work")
    assert await other_repo.list_tags() == []
    assert await other_repo.update_tag(str(tag["_id"]), {"name": "x"}) is None
    assert await other_repo.delete_tag(str(tag["_id"])) is False
    assert len(await repo.list_tags()) == 1


@pytest.mark.asyncio
async def test_delete_tag_pulls_reference_from_owner_notes_only(repo, other_repo):
    tag = await repo.create_tag("work")
    keep = await repo.create_tag("home")
    tag_id, keep_id = str(tag["_id"]), str(keep["_id"])

    tagged = await repo.create_note({"title": "a", "content": "c", "tag_ids": [tag_id, keep_id]})
    journal = await repo.create_note({"title": "b", "content": "c", "tag_ids": [tag_id]}, journal=True)
    foreign = await other_repo.create_note({"title": "theirs", "content": "c", "tag_ids": [tag_id]})

    assert await repo.delete_tag(tag_id) is True

    assert (await repo.get_note(str(tagged["_id"])))["tag_ids"] == [keep_id]
    assert (await repo.get_note(str(journal["_id"])))["tag_ids"] == []
    assert (await other_repo.get_note(str(foreign["_id"])))["tag_ids"] == [tag_id]
    assert [t["name"] for t in await repo.list_tags()] == ["home"]


@pytest.mark.asyncio
async def test_delete_missing_tag_skips_cleanup(repo, other_repo):
    foreign_tag = await other_repo.create_tag("theirs")
    foreign_tag_id = str(foreign_tag["_id"])
    note = await repo.create_note({"title": "a", "content": "c", "tag_ids": [foreign_tag_id]})

    assert await repo.delete_tag(foreign_tag_id) is False
    assert (await repo.get_note(str(note["_id"])))["tag_ids"] == [foreign_tag_id]
