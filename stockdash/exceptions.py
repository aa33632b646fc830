class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} '{resource_id}' not found", code="NOT_FOUND")


class StockDataNotFoundError(NotFoundError):
    def __init__(self, symbol: str):
        self.symbol = symbol
        AppError.__init__(self, f"Stock data not found for {symbol}", code="NOT_FOUND")


class ValidationError(AppError):
    status_code = 422

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class LLMConfigError(AppError):
    """The chat model cannot be built from the current settings."""

    status_code = 503

    def __init__(self, message: str):
        super().__init__(message, code="LLM_CONFIG_ERROR")
