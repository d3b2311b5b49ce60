class HotelSearchError(Exception):
    """Base class for conditions raised by the hotel search stack."""

    status_code = 500
    error = "Erro interno"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(HotelSearchError):
    """Malformed query: bad limit/offset, unsupported sort field, bad flag."""

    status_code = 400
    error = "Parâmetros inválidos"


class NotFoundError(HotelSearchError):
    status_code = 404
    error = "Hotel não encontrado"


class TransientFetchError(HotelSearchError):
    """Network or server failure seen by the client; recovered locally."""

    status_code = 503
    error = "Erro ao buscar hotéis"


class InternalError(HotelSearchError):
    status_code = 500
    error = "Internal Server Error"
