from enum import Enum


class LookupErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    NETWORK = "network"
    DECODING = "decoding"
    UNKNOWN = "unknown"


class ProductLookupError(Exception):
    def __init__(self, kind: LookupErrorKind, message: str = ""):
        self.kind = kind
        self.message = message
        super().__init__(self.description)

    @property
    def description(self) -> str:
        if self.kind == LookupErrorKind.NOT_FOUND:
            return "Product not found in our database or Open Beauty Facts."
        if self.kind == LookupErrorKind.NETWORK:
            return f"Network error: {self.message}"
        if self.kind == LookupErrorKind.DECODING:
            return f"Failed to decode product data: {self.message}"
        return f"An unexpected error occurred: {self.message}"

    @classmethod
    def not_found(cls) -> "ProductLookupError":
        return cls(LookupErrorKind.NOT_FOUND)


class AddProductErrorKind(str, Enum):
    ENCODING = "encoding"
    NETWORK = "network"
    SERVER = "server"


class AddProductError(Exception):
    def __init__(self, kind: AddProductErrorKind, message: str = ""):
        self.kind = kind
        self.message = message
        super().__init__(self.description)

    @property
    def description(self) -> str:
        if self.kind == AddProductErrorKind.ENCODING:
            return f"Failed to encode product data: {self.message}"
        if self.kind == AddProductErrorKind.NETWORK:
            return f"Network error: {self.message}"
        return f"Server error: {self.message}"


class TextRecognitionErrorKind(str, Enum):
    NOT_CONFIGURED = "not_configured"
    NO_TEXT_FOUND = "no_text_found"
    PROCESSING_FAILED = "processing_failed"


class TextRecognitionError(Exception):
    def __init__(self, kind: TextRecognitionErrorKind, message: str = ""):
        self.kind = kind
        self.message = message
        super().__init__(self.description)

    @property
    def description(self) -> str:
        if self.kind == TextRecognitionErrorKind.NOT_CONFIGURED:
            return "Text recognition is not configured"
        if self.kind == TextRecognitionErrorKind.NO_TEXT_FOUND:
            return "No text found in the image"
        return f"Text recognition processing failed: {self.message}"
