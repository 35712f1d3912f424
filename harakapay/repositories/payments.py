from harakapay.clients.supabase import SupabaseClient
from harakapay.repositories.errors import raise_for_error
from harakapay.schemas.payment import PaymentRecord

PAYMENT_COLUMNS = (
    "id, student_id, amount, status, payment_method, transaction_reference, description, "
    "installment_number, installment_label, created_at, updated_at"
)


class PaymentRepository:
    def __init__(self, client: SupabaseClient):
        self.client = client

    def get(self, payment_id: str) -> PaymentRecord:
        result = self.client.select("payments", PAYMENT_COLUMNS, filters={"id": payment_id}, single=True)
        if not result.ok:
            raise_for_error(result.error, "payment")
        return PaymentRecord.model_validate(result.data)

    def list_for_student(self, student_id: str) -> list[PaymentRecord]:
        result = self.client.select(
            "payments",
            PAYMENT_COLUMNS,
            filters={"student_id": student_id},
            order="created_at.desc",
        )
        if not result.ok:
            raise_for_error(result.error, "payment history")
        return [PaymentRecord.model_validate(row) for row in result.data or []]
