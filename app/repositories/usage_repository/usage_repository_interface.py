class UsageRepositoryInterface:
    def log_usage(
        self,
        user_id: str,
        tenant_id: str,
        provider: str,
        model: str,
        tokens: int,
    ) -> None:
        """Record the tokens consumed by one chat request."""
        raise NotImplementedError

    def get_total_tokens(self, tenant_id: str) -> int:
        raise NotImplementedError
