from harakapay.clients.supabase import SupabaseClient
from harakapay.repositories.errors import raise_for_error
from harakapay.schemas.parent import Parent

PARENT_COLUMNS = "id, user_id, first_name, last_name, phone, email, is_active"


class ParentRepository:
    def __init__(self, client: SupabaseClient):
        self.client = client

    def get_by_user_id(self, user_id: str) -> Parent:
        """Return the parent profile created for ``user_id`` at signup."""
        result = self.client.select("parents", PARENT_COLUMNS, filters={"user_id": user_id}, single=True)
        if not result.ok:
            raise_for_error(result.error, "parent profile")
        return Parent.model_validate(result.data)
