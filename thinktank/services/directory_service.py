"""
Partner and team directories, plus the publication taxonomy.

Directory rows flagged ``show_on_website = False`` are drafts of a sort:
only admins see them.
"""

from typing import Any, List, Optional

from sqlalchemy.sql.elements import ColumnElement

from thinktank.content.repository import ListFilter
from thinktank.kernel.identity.caller import Caller
from thinktank.kernel.models.directory import (
    Partner,
    PartnerCategory,
    TeamMember,
    TeamMemberCategory,
)
from thinktank.kernel.models.publication import Category, Tag
from thinktank.kernel.permissions import public_directory_clause
from thinktank.services.admin_records import AdminRecordService


class _DirectoryService(AdminRecordService):
    def read_clause(self, caller: Caller) -> Optional[ColumnElement]:
        return public_directory_clause(caller, self.model)

    def _visible(self, caller: Caller, record: Any) -> bool:
        return caller.is_admin or bool(record.show_on_website)

    async def by_category(self, caller: Caller, category: Optional[str] = None) -> List[Any]:
        filters = ListFilter()
        if category is not None:
            filters.category = self._prepare({"category": category})["category"]
        items, _ = await self.list(caller, filters)
        return items


class PartnerService(_DirectoryService):
    model = Partner
    entity_type = "partner"
    label = "Partner"
    plain_text_fields = ("name",)
    rich_text_fields = ("description",)
    enum_fields = {"category": PartnerCategory}


class TeamMemberService(_DirectoryService):
    model = TeamMember
    entity_type = "team_member"
    label = "Team member"
    plain_text_fields = ("name", "role")
    rich_text_fields = ("bio",)
    enum_fields = {"category": TeamMemberCategory}


class CategoryService(AdminRecordService):
    model = Category
    entity_type = "category"
    label = "Category"
    plain_text_fields = ("name", "description")


class TagService(AdminRecordService):
    model = Tag
    entity_type = "tag"
    label = "Tag"
    plain_text_fields = ("name",)
