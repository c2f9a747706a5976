from unittest.mock import AsyncMock

import pytest

from portal.domain.feed import MembershipResolver


@pytest.mark.asyncio
async def test_student_resolves_followed_clubs(seed):
	rep_a = await seed.user("club")
	rep_b = await seed.user("club")
	club_a = await seed.club(rep_a, name="Club A")
	club_b = await seed.club(rep_b, name="Club B")
	student = await seed.user("student", follows=[club_a, club_b])

	clubs = await MembershipResolver().resolve(student.id, "student")

	assert clubs == {club_a.id, club_b.id}


@pytest.mark.asyncio
async def test_student_without_follows_resolves_empty(seed):
	student = await seed.user("student")

	assert await MembershipResolver().resolve(student.id, "student") == set()


@pytest.mark.asyncio
async def test_faculty_resolves_coordinated_clubs(seed):
	faculty = await seed.user("faculty")
	other_faculty = await seed.user("faculty")
	club_a = await seed.club(await seed.user("club"), name="Club A", coordinator=faculty)
	await seed.club(await seed.user("club"), name="Club B", coordinator=other_faculty)
	club_c = await seed.club(await seed.user("club"), name="Club C", coordinator=faculty)

	clubs = await MembershipResolver().resolve(faculty.id, "faculty")

	assert clubs == {club_a.id, club_c.id}


@pytest.mark.asyncio
async def test_club_representative_resolves_own_club(seed):
	rep = await seed.user("club")
	club = await seed.club(rep)
	orphan_rep = await seed.user("club")

	resolver = MembershipResolver()

	assert await resolver.resolve(rep.id, "club") == {club.id}
	assert await resolver.resolve(orphan_rep.id, "club") == set()


@pytest.mark.asyncio
async def test_role_matching_is_case_insensitive(seed):
	rep = await seed.user("club")
	club = await seed.club(rep)

	assert await MembershipResolver().resolve(rep.id, "Club") == {club.id}


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["admin", None, "", "visitor"])
async def test_other_roles_resolve_empty(seed, role):
	user = await seed.user("admin")

	assert await MembershipResolver().resolve(user.id, role) == set()


@pytest.mark.asyncio
async def test_resolve_or_empty_swallows_lookup_failures():
	repo = AsyncMock()
	repo.list_followed_club_ids.side_effect = RuntimeError("db down")
	resolver = MembershipResolver(repository=repo)

	with pytest.raises(RuntimeError):
		await resolver.resolve("user-1", "student")
	assert await resolver.resolve_or_empty("user-1", "student") == set()
