"""
Retry budget: how many execution attempts one query may make.
"""


class RetryBudget:
    """
    Attempts made so far versus the configured maximum.

    One instance per query; it is never reset.
    """

    def __init__(self, max_attempts: int):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.max_attempts = max_attempts
        self.attempts_made = 0

    @property
    def remaining(self) -> int:
        return self.max_attempts - self.attempts_made

    @property
    def exhausted(self) -> bool:
        return self.attempts_made >= self.max_attempts

    def consume(self) -> int:
        """
        Take one attempt from the budget.

        Returns:
            The 1-indexed number of the attempt about to run

        Raises:
            RuntimeError: If the budget is already exhausted
        """
        if self.exhausted:
            raise RuntimeError(
                f"Retry budget exhausted ({self.attempts_made}/{self.max_attempts} attempts)"
            )
        self.attempts_made += 1
        return self.attempts_made

    def __repr__(self) -> str:
        return f"RetryBudget({self.attempts_made}/{self.max_attempts})"
