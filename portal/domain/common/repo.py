"""Async repository for portal records.

Reads perform the author/club lookups up front so callers receive flat,
render-ready records. When no Postgres pool has been initialised (local
development, tests) the repository serves from an in-process store.
"""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

import asyncpg

from portal.domain.common import models
from portal.infra import postgres

_NOTICE_SELECT = """
	SELECT n.id, n.title, n.content, n.author_id, n.category, n.audience, n.expires_at,
	       n.is_pinned, n.attachments, n.created_at,
	       u.name AS author_name, u.role AS author_role
	FROM notices n
	LEFT JOIN users u ON u.id = n.author_id
"""

_ANNOUNCEMENT_SELECT = """
	SELECT a.id, a.title, a.content, a.author_id, a.club_id, a.created_at,
	       u.name AS author_name, c.name AS club_name
	FROM announcements a
	LEFT JOIN users u ON u.id = a.author_id
	LEFT JOIN clubs c ON c.id = a.club_id
"""

_EVENT_SELECT = """
	SELECT e.id, e.title, e.description, e.starts_at, e.location, e.author_id, e.club_id,
	       e.created_at, u.name AS author_name, c.name AS club_name
	FROM events e
	LEFT JOIN users u ON u.id = e.author_id
	LEFT JOIN clubs c ON c.id = e.club_id
"""

_CLUB_COLUMNS = "id, name, description, category, faculty_coordinator_id, representative_id, created_at"

_CLUB_PROFILE_SELECT = """
	SELECT c.id, c.name, c.description, c.category, c.faculty_coordinator_id, c.representative_id,
	       c.created_at, fc.name AS coordinator_name, r.name AS representative_name,
	       r.email AS representative_email
	FROM clubs c
	LEFT JOIN users fc ON fc.id = c.faculty_coordinator_id
	LEFT JOIN users r ON r.id = c.representative_id
"""


def _now() -> datetime:
	return datetime.now(timezone.utc)


def _str_or_none(value: Any) -> Optional[str]:
	return str(value) if value is not None else None


def _author(author_id: Any, name: Optional[str], role: Optional[str] = None) -> models.AuthorSummary:
	return models.AuthorSummary(id=str(author_id), name=name or models.UNKNOWN_NAME, role=role)


def _club_summary(club_id: Any, name: Optional[str]) -> models.ClubSummary:
	return models.ClubSummary(id=str(club_id), name=name or models.UNKNOWN_NAME)


def _notice_from_row(row: Any) -> models.Notice:
	attachments = row["attachments"] or []
	if isinstance(attachments, str):
		attachments = json.loads(attachments)
	return models.Notice(
		id=str(row["id"]),
		title=row["title"],
		content=row["content"],
		author=_author(row["author_id"], row["author_name"], row["author_role"]),
		category=row["category"],
		audience=row["audience"],
		expires_at=row["expires_at"],
		is_pinned=row["is_pinned"],
		attachments=attachments,
		created_at=row["created_at"],
	)


def _announcement_from_row(row: Any) -> models.Announcement:
	return models.Announcement(
		id=str(row["id"]),
		title=row["title"],
		content=row["content"],
		author=_author(row["author_id"], row["author_name"]),
		club=_club_summary(row["club_id"], row["club_name"]),
		created_at=row["created_at"],
	)


def _event_from_row(row: Any) -> models.Event:
	return models.Event(
		id=str(row["id"]),
		title=row["title"],
		description=row["description"],
		date=row["starts_at"],
		location=row["location"],
		author=_author(row["author_id"], row["author_name"]),
		club=_club_summary(row["club_id"], row["club_name"]),
		created_at=row["created_at"],
	)


def _club_from_row(row: Any) -> models.Club:
	return models.Club(
		id=str(row["id"]),
		name=row["name"],
		description=row["description"] or "",
		category=row["category"] or "Other",
		faculty_coordinator_id=_str_or_none(row["faculty_coordinator_id"]),
		representative_id=str(row["representative_id"]),
		created_at=row["created_at"],
	)


def _club_profile_from_row(row: Any) -> models.ClubProfile:
	coordinator = None
	if row["faculty_coordinator_id"] is not None:
		coordinator = models.MemberSummary(
			id=str(row["faculty_coordinator_id"]),
			name=row["coordinator_name"] or models.UNKNOWN_NAME,
		)
	return models.ClubProfile(
		**_club_from_row(row).model_dump(),
		faculty_coordinator=coordinator,
		representative=models.MemberSummary(
			id=str(row["representative_id"]),
			name=row["representative_name"] or models.UNKNOWN_NAME,
			email=row["representative_email"],
		),
	)


class _MemoryStore:
	def __init__(self) -> None:
		self._lock = asyncio.Lock()
		self.users: Dict[str, models.User] = {}
		self.clubs: Dict[str, models.Club] = {}
		self.notices: Dict[str, Dict[str, Any]] = {}
		self.announcements: Dict[str, Dict[str, Any]] = {}
		self.events: Dict[str, Dict[str, Any]] = {}

	def reset(self) -> None:
		self.users.clear()
		self.clubs.clear()
		self.notices.clear()
		self.announcements.clear()
		self.events.clear()

	def _author(self, author_id: str, *, with_role: bool = False) -> models.AuthorSummary:
		user = self.users.get(author_id)
		if user is None:
			return models.AuthorSummary(id=author_id)
		return models.AuthorSummary(id=author_id, name=user.name, role=user.role if with_role else None)

	def _club(self, club_id: str) -> models.ClubSummary:
		club = self.clubs.get(club_id)
		return models.ClubSummary(id=club_id, name=club.name if club else models.UNKNOWN_NAME)

	def _member(self, user_id: str, *, with_email: bool = False) -> models.MemberSummary:
		user = self.users.get(user_id)
		if user is None:
			return models.MemberSummary(id=user_id)
		return models.MemberSummary(id=user.id, name=user.name, email=user.email if with_email else None)

	def _profile(self, club: models.Club) -> models.ClubProfile:
		coordinator_id = club.faculty_coordinator_id
		return models.ClubProfile(
			**club.model_dump(),
			faculty_coordinator=self._member(coordinator_id) if coordinator_id else None,
			representative=self._member(club.representative_id, with_email=True),
		)

	def _notice(self, record: Dict[str, Any]) -> models.Notice:
		data = dict(record)
		data["author"] = self._author(data.pop("author_id"), with_role=True)
		return models.Notice(**data)

	def _announcement(self, record: Dict[str, Any]) -> models.Announcement:
		data = dict(record)
		data["author"] = self._author(data.pop("author_id"))
		data["club"] = self._club(data.pop("club_id"))
		return models.Announcement(**data)

	def _event(self, record: Dict[str, Any]) -> models.Event:
		data = dict(record)
		data["author"] = self._author(data.pop("author_id"))
		data["club"] = self._club(data.pop("club_id"))
		return models.Event(**data)

	async def upsert_user(self, user: models.User) -> models.User:
		async with self._lock:
			self.users[user.id] = user
			return user

	async def upsert_club(self, club: models.Club) -> models.Club:
		async with self._lock:
			self.clubs[club.id] = club
			return club

	async def get_user(self, user_id: str) -> Optional[models.User]:
		async with self._lock:
			user = self.users.get(user_id)
			return user.model_copy(deep=True) if user else None

	async def get_club(self, club_id: str) -> Optional[models.Club]:
		async with self._lock:
			return self.clubs.get(club_id)

	async def get_club_by_representative(self, user_id: str) -> Optional[models.Club]:
		async with self._lock:
			for club in self.clubs.values():
				if club.representative_id == user_id:
					return club
			return None

	async def list_coordinated_club_ids(self, user_id: str) -> List[str]:
		async with self._lock:
			return [club.id for club in self.clubs.values() if club.faculty_coordinator_id == user_id]

	async def list_followed_club_ids(self, user_id: str) -> List[str]:
		async with self._lock:
			user = self.users.get(user_id)
			return list(user.followed_clubs) if user else []

	async def follow_club(self, user_id: str, club_id: str) -> Optional[List[str]]:
		async with self._lock:
			user = self.users.get(user_id)
			if user is None:
				return None
			if club_id not in user.followed_clubs:
				user.followed_clubs.append(club_id)
			return list(user.followed_clubs)

	async def unfollow_club(self, user_id: str, club_id: str) -> Optional[List[str]]:
		async with self._lock:
			user = self.users.get(user_id)
			if user is None:
				return None
			user.followed_clubs = [cid for cid in user.followed_clubs if cid != club_id]
			return list(user.followed_clubs)

	async def count_followers(self, club_id: str) -> int:
		async with self._lock:
			return sum(1 for user in self.users.values() if club_id in user.followed_clubs)

	async def list_clubs(
		self,
		*,
		coordinator_id: Optional[str],
		representative_id: Optional[str],
	) -> List[models.ClubProfile]:
		async with self._lock:
			profiles = [
				self._profile(club)
				for club in self.clubs.values()
				if (coordinator_id is None or club.faculty_coordinator_id == coordinator_id)
				and (representative_id is None or club.representative_id == representative_id)
			]
		profiles.sort(key=lambda club: club.name)
		return profiles

	async def list_followers(self, club_id: str) -> List[models.MemberSummary]:
		async with self._lock:
			followers = [
				models.MemberSummary(id=user.id, name=user.name, email=user.email)
				for user in self.users.values()
				if club_id in user.followed_clubs
			]
		followers.sort(key=lambda member: member.name)
		return followers

	async def insert_notice(self, record: Dict[str, Any]) -> models.Notice:
		async with self._lock:
			self.notices[record["id"]] = record
			return self._notice(record)

	async def insert_announcement(self, record: Dict[str, Any]) -> models.Announcement:
		async with self._lock:
			self.announcements[record["id"]] = record
			return self._announcement(record)

	async def insert_event(self, record: Dict[str, Any]) -> models.Event:
		async with self._lock:
			self.events[record["id"]] = record
			return self._event(record)

	async def get_notice(self, notice_id: str) -> Optional[models.Notice]:
		async with self._lock:
			record = self.notices.get(notice_id)
			return self._notice(record) if record else None

	async def get_announcement(self, announcement_id: str) -> Optional[models.Announcement]:
		async with self._lock:
			record = self.announcements.get(announcement_id)
			return self._announcement(record) if record else None

	async def get_event(self, event_id: str) -> Optional[models.Event]:
		async with self._lock:
			record = self.events.get(event_id)
			return self._event(record) if record else None

	async def delete_notice(self, notice_id: str) -> bool:
		async with self._lock:
			return self.notices.pop(notice_id, None) is not None

	async def delete_announcement(self, announcement_id: str) -> bool:
		async with self._lock:
			return self.announcements.pop(announcement_id, None) is not None

	async def delete_event(self, event_id: str) -> bool:
		async with self._lock:
			return self.events.pop(event_id, None) is not None

	async def list_notices(self, *, active_at: datetime, pinned_first: bool) -> List[models.Notice]:
		async with self._lock:
			notices = [self._notice(record) for record in self.notices.values()]
		notices = [notice for notice in notices if notice.is_active(active_at)]
		notices.sort(key=lambda notice: notice.created_at, reverse=True)
		if pinned_first:
			notices.sort(key=lambda notice: notice.is_pinned, reverse=True)
		return notices

	async def list_announcements(self, *, club_ids: Optional[Sequence[str]]) -> List[models.Announcement]:
		async with self._lock:
			records = [
				record
				for record in self.announcements.values()
				if club_ids is None or record["club_id"] in club_ids
			]
			items = [self._announcement(record) for record in records]
		items.sort(key=lambda item: item.created_at, reverse=True)
		return items

	async def list_events(
		self,
		*,
		club_ids: Optional[Sequence[str]],
		starting_from: Optional[datetime],
	) -> List[models.Event]:
		async with self._lock:
			records = [
				record
				for record in self.events.values()
				if (club_ids is None or record["club_id"] in club_ids)
				and (starting_from is None or record["date"] >= starting_from)
			]
			items = [self._event(record) for record in records]
		items.sort(key=lambda item: item.date)
		return items


_MEMORY = _MemoryStore()


def memory_store() -> _MemoryStore:
	return _MEMORY


class PortalRepository:
	"""Thin data-access layer around asyncpg."""

	async def _get_pool(self) -> Optional[asyncpg.Pool]:
		return postgres.current_pool()

	# --- Users & clubs ----------------------------------------------------

	async def get_user(self, user_id: str) -> Optional[models.User]:
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.get_user(user_id)
		async with pool.acquire() as conn:
			row = await conn.fetchrow("SELECT id, name, email, role FROM users WHERE id = $1", user_id)
			if not row:
				return None
			followed = await conn.fetch(
				"SELECT club_id FROM club_followers WHERE user_id = $1 ORDER BY followed_at",
				user_id,
			)
		return models.User(
			id=str(row["id"]),
			name=row["name"],
			email=row["email"],
			role=row["role"],
			followed_clubs=[str(item["club_id"]) for item in followed],
		)

	async def get_club(self, club_id: str) -> Optional[models.Club]:
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.get_club(club_id)
		async with pool.acquire() as conn:
			row = await conn.fetchrow(f"SELECT {_CLUB_COLUMNS} FROM clubs WHERE id = $1", club_id)
		return _club_from_row(row) if row else None

	async def get_club_by_representative(self, user_id: str) -> Optional[models.Club]:
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.get_club_by_representative(user_id)
		async with pool.acquire() as conn:
			row = await conn.fetchrow(
				f"SELECT {_CLUB_COLUMNS} FROM clubs WHERE representative_id = $1",
				user_id,
			)
		return _club_from_row(row) if row else None

	async def list_coordinated_club_ids(self, user_id: str) -> List[str]:
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.list_coordinated_club_ids(user_id)
		async with pool.acquire() as conn:
			rows = await conn.fetch("SELECT id FROM clubs WHERE faculty_coordinator_id = $1", user_id)
		return [str(row["id"]) for row in rows]

	async def list_followed_club_ids(self, user_id: str) -> List[str]:
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.list_followed_club_ids(user_id)
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				"SELECT club_id FROM club_followers WHERE user_id = $1 ORDER BY followed_at",
				user_id,
			)
		return [str(row["club_id"]) for row in rows]

	async def follow_club(self, user_id: str, club_id: str) -> Optional[List[str]]:
		"""Add the follow edge; returns the updated followed list or None for unknown users."""
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.follow_club(user_id, club_id)
		async with pool.acquire() as conn:
			exists = await conn.fetchval("SELECT 1 FROM users WHERE id = $1", user_id)
			if not exists:
				return None
			await conn.execute(
				"""
				INSERT INTO club_followers (user_id, club_id)
				VALUES ($1, $2)
				ON CONFLICT (user_id, club_id) DO NOTHING
				""",
				user_id,
				club_id,
			)
		return await self.list_followed_club_ids(user_id)

	async def unfollow_club(self, user_id: str, club_id: str) -> Optional[List[str]]:
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.unfollow_club(user_id, club_id)
		async with pool.acquire() as conn:
			exists = await conn.fetchval("SELECT 1 FROM users WHERE id = $1", user_id)
			if not exists:
				return None
			await conn.execute(
				"DELETE FROM club_followers WHERE user_id = $1 AND club_id = $2",
				user_id,
				club_id,
			)
		return await self.list_followed_club_ids(user_id)

	async def count_followers(self, club_id: str) -> int:
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.count_followers(club_id)
		async with pool.acquire() as conn:
			count = await conn.fetchval("SELECT COUNT(*) FROM club_followers WHERE club_id = $1", club_id)
		return int(count or 0)

	async def list_clubs(
		self,
		*,
		coordinator_id: Optional[str] = None,
		representative_id: Optional[str] = None,
	) -> List[models.ClubProfile]:
		"""Clubs ordered by name, with coordinator and representative names attached."""
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.list_clubs(coordinator_id=coordinator_id, representative_id=representative_id)
		clauses: list[str] = []
		args: list[Any] = []
		if coordinator_id is not None:
			args.append(coordinator_id)
			clauses.append(f"c.faculty_coordinator_id = ${len(args)}")
		if representative_id is not None:
			args.append(representative_id)
			clauses.append(f"c.representative_id = ${len(args)}")
		query = _CLUB_PROFILE_SELECT
		if clauses:
			query += " WHERE " + " AND ".join(clauses)
		query += " ORDER BY c.name ASC"
		async with pool.acquire() as conn:
			rows = await conn.fetch(query, *args)
		return [_club_profile_from_row(row) for row in rows]

	async def list_followers(self, club_id: str) -> List[models.MemberSummary]:
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.list_followers(club_id)
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				"""
				SELECT u.id, u.name, u.email
				FROM club_followers f
				JOIN users u ON u.id = f.user_id
				WHERE f.club_id = $1
				ORDER BY u.name ASC
				""",
				club_id,
			)
		return [models.MemberSummary(id=str(row["id"]), name=row["name"], email=row["email"]) for row in rows]

	# --- Notices ----------------------------------------------------------

	async def create_notice(
		self,
		*,
		author_id: str,
		title: str,
		content: str,
		category: str,
		audience: str,
		expires_at: Optional[datetime],
		is_pinned: bool,
		attachments: Sequence[models.Attachment],
	) -> models.Notice:
		record = {
			"id": str(uuid4()),
			"title": title,
			"content": content,
			"author_id": author_id,
			"category": category,
			"audience": audience,
			"expires_at": expires_at,
			"is_pinned": is_pinned,
			"attachments": [attachment.model_dump() for attachment in attachments],
			"created_at": _now(),
		}
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.insert_notice(record)
		async with pool.acquire() as conn:
			await conn.execute(
				"""
				INSERT INTO notices (id, title, content, author_id, category, audience, expires_at,
					is_pinned, attachments, created_at)
				VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9::jsonb, $10)
				""",
				record["id"],
				title,
				content,
				author_id,
				category,
				audience,
				expires_at,
				is_pinned,
				json.dumps(record["attachments"]),
				record["created_at"],
			)
		notice = await self.get_notice(record["id"])
		assert notice is not None
		return notice

	async def get_notice(self, notice_id: str) -> Optional[models.Notice]:
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.get_notice(notice_id)
		async with pool.acquire() as conn:
			row = await conn.fetchrow(_NOTICE_SELECT + " WHERE n.id = $1", notice_id)
		return _notice_from_row(row) if row else None

	async def delete_notice(self, notice_id: str) -> bool:
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.delete_notice(notice_id)
		async with pool.acquire() as conn:
			result = await conn.execute("DELETE FROM notices WHERE id = $1", notice_id)
		return result.endswith(" 1")

	async def list_notices(self, *, active_at: datetime, pinned_first: bool = False) -> List[models.Notice]:
		"""Notices that have no expiry or expire after ``active_at``, newest first."""
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.list_notices(active_at=active_at, pinned_first=pinned_first)
		query = _NOTICE_SELECT + " WHERE n.expires_at IS NULL OR n.expires_at > $1"
		query += " ORDER BY n.is_pinned DESC, n.created_at DESC" if pinned_first else " ORDER BY n.created_at DESC"
		async with pool.acquire() as conn:
			rows = await conn.fetch(query, active_at)
		return [_notice_from_row(row) for row in rows]

	# --- Announcements ----------------------------------------------------

	async def create_announcement(
		self,
		*,
		club_id: str,
		author_id: str,
		title: str,
		content: str,
	) -> models.Announcement:
		record = {
			"id": str(uuid4()),
			"club_id": club_id,
			"author_id": author_id,
			"title": title,
			"content": content,
			"created_at": _now(),
		}
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.insert_announcement(record)
		async with pool.acquire() as conn:
			await conn.execute(
				"""
				INSERT INTO announcements (id, club_id, author_id, title, content, created_at)
				VALUES ($1, $2, $3, $4, $5, $6)
				""",
				record["id"],
				club_id,
				author_id,
				title,
				content,
				record["created_at"],
			)
		announcement = await self.get_announcement(record["id"])
		assert announcement is not None
		return announcement

	async def get_announcement(self, announcement_id: str) -> Optional[models.Announcement]:
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.get_announcement(announcement_id)
		async with pool.acquire() as conn:
			row = await conn.fetchrow(_ANNOUNCEMENT_SELECT + " WHERE a.id = $1", announcement_id)
		return _announcement_from_row(row) if row else None

	async def delete_announcement(self, announcement_id: str) -> bool:
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.delete_announcement(announcement_id)
		async with pool.acquire() as conn:
			result = await conn.execute("DELETE FROM announcements WHERE id = $1", announcement_id)
		return result.endswith(" 1")

	async def list_announcements(self, *, club_ids: Optional[Sequence[str]] = None) -> List[models.Announcement]:
		"""All announcements, or those of ``club_ids``; newest first."""
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.list_announcements(club_ids=club_ids)
		query = _ANNOUNCEMENT_SELECT
		args: list[Any] = []
		if club_ids is not None:
			query += " WHERE a.club_id = ANY($1::uuid[])"
			args.append(list(club_ids))
		query += " ORDER BY a.created_at DESC"
		async with pool.acquire() as conn:
			rows = await conn.fetch(query, *args)
		return [_announcement_from_row(row) for row in rows]

	# --- Events -----------------------------------------------------------

	async def create_event(
		self,
		*,
		club_id: str,
		author_id: str,
		title: str,
		description: str,
		date: datetime,
		location: Optional[str],
	) -> models.Event:
		record = {
			"id": str(uuid4()),
			"club_id": club_id,
			"author_id": author_id,
			"title": title,
			"description": description,
			"date": date,
			"location": location or "Campus",
			"created_at": _now(),
		}
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.insert_event(record)
		async with pool.acquire() as conn:
			await conn.execute(
				"""
				INSERT INTO events (id, club_id, author_id, title, description, starts_at, location, created_at)
				VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
				""",
				record["id"],
				club_id,
				author_id,
				title,
				description,
				date,
				record["location"],
				record["created_at"],
			)
		event = await self.get_event(record["id"])
		assert event is not None
		return event

	async def get_event(self, event_id: str) -> Optional[models.Event]:
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.get_event(event_id)
		async with pool.acquire() as conn:
			row = await conn.fetchrow(_EVENT_SELECT + " WHERE e.id = $1", event_id)
		return _event_from_row(row) if row else None

	async def delete_event(self, event_id: str) -> bool:
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.delete_event(event_id)
		async with pool.acquire() as conn:
			result = await conn.execute("DELETE FROM events WHERE id = $1", event_id)
		return result.endswith(" 1")

	async def list_events(
		self,
		*,
		club_ids: Optional[Sequence[str]] = None,
		starting_from: Optional[datetime] = None,
	) -> List[models.Event]:
		"""Events ordered by date ascending, optionally scoped to clubs and a lower date bound."""
		pool = await self._get_pool()
		if pool is None:
			return await _MEMORY.list_events(club_ids=club_ids, starting_from=starting_from)
		clauses: list[str] = []
		args: list[Any] = []
		if club_ids is not None:
			args.append(list(club_ids))
			clauses.append(f"e.club_id = ANY(${len(args)}::uuid[])")
		if starting_from is not None:
			args.append(starting_from)
			clauses.append(f"e.starts_at >= ${len(args)}")
		query = _EVENT_SELECT
		if clauses:
			query += " WHERE " + " AND ".join(clauses)
		query += " ORDER BY e.starts_at ASC"
		async with pool.acquire() as conn:
			rows = await conn.fetch(query, *args)
		return [_event_from_row(row) for row in rows]
