from typing import Any
from uuid import uuid4

from recollect.constants import PREFERENCES_KEY
from recollect.memory.models import PreferenceCategory, UserPreference
from recollect.memory.store import CachedListRepository
from recollect.utils import utc_now


class PreferenceStore(CachedListRepository[UserPreference]):
    key = PREFERENCES_KEY
    model = UserPreference

    async def list_all(self) -> list[UserPreference]:
        return list(await self._load())

    async def get_preference(self, category: PreferenceCategory | str, key: str) -> UserPreference | None:
        category = PreferenceCategory(category)
        for pref in await self._load():
            if pref.category == category and pref.key == key:
                return pref
        return None

    async def get(self, category: PreferenceCategory | str, key: str) -> Any | None:
        pref = await self.get_preference(category, key)
        return pref.value if pref else None

    async def set(
        self,
        category: PreferenceCategory | str,
        key: str,
        value: Any,
        description: str | None = None,
    ) -> UserPreference:
        category = PreferenceCategory(category)
        prefs = await self._load()
        now = utc_now()

        for i, existing in enumerate(prefs):
            if existing.category == category and existing.key == key:
                updated = existing.model_copy(
                    update={
                        "value": value,
                        "description": description if description is not None else existing.description,
                        "updated_at": now,
                    }
                )
                prefs[i] = updated
                break
        else:
            updated = UserPreference(
                id=f"pref_{uuid4().hex[:12]}",
                category=category,
                key=key,
                value=value,
                description=description,
                created_at=now,
                updated_at=now,
            )
            prefs.append(updated)

        await self._store(prefs)
        return updated
