class GenerationError(RuntimeError):
    """Remote generation failed; ``cause`` holds whatever the client raised."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class UnknownCategoryError(ValueError):
    def __init__(self, category_id: str) -> None:
        super().__init__(f"unknown category: {category_id!r}")
        self.category_id = category_id
