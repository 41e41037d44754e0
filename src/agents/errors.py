"""Agent hata tipleri."""


class ValidationError(Exception):
    """Girdi veya aksiyon validasyon hatası."""
    pass


class ActionNotFoundError(ValidationError):
    """Aksiyon bulunamadı."""
    pass


class UndoWindowExpiredError(ValidationError):
    """Geri alma süresi dolmuş."""
    pass
