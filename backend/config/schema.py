"""Root GraphQL schema."""
import strawberry

from apps.billing.schema import BillingQuery


@strawberry.type
class Query(BillingQuery):
    @strawberry.field
    def health(self) -> str:
        return "ok"


schema = strawberry.Schema(query=Query)
