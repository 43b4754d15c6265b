class ServiceError(Exception):
    """Base for failures that map onto a fixed client-facing response."""
    status_code = 500
    public_message = 'Internal server error'
    kind = 'internal_error'

    def __init__(self, detail: str = ''):
        super().__init__(detail or self.public_message)
        self.detail = detail

    def to_body(self) -> dict:
        return {'error': self.public_message}


class AdmissionError(ServiceError):
    kind = 'admission'

    def __init__(self, detail: str = '', decision=None):
        super().__init__(detail)
        # RateDecision of the hit that was rejected, when the limiter ran
        self.decision = decision

    def headers(self) -> dict:
        return self.decision.headers() if self.decision is not None else {}


class PayloadTooLarge(AdmissionError):
    status_code = 413
    public_message = 'Payload too large'
    kind = 'payload_too_large'


class RateLimited(AdmissionError):
    status_code = 429
    public_message = 'Too many requests, please try again later.'
    kind = 'rate_limited'


class CorsRejected(AdmissionError):
    status_code = 403
    public_message = 'Not allowed by CORS'
    kind = 'cors_rejected'


class InputError(ServiceError):
    status_code = 400
    kind = 'invalid_input'


class MissingOrInvalidField(InputError):
    public_message = 'Invalid payload: text required'
    kind = 'missing_or_invalid_field'


class TooShort(InputError):
    public_message = 'Text too short'
    kind = 'too_short'


class TooLong(InputError):
    public_message = 'Text too long'
    kind = 'too_long'


class InternalFailure(ServiceError):
    # detail stays server side; clients only ever see public_message
    pass


class UpstreamError(InternalFailure):
    kind = 'upstream_error'


class UpstreamTimeout(UpstreamError):
    kind = 'upstream_timeout'


class UnparseableResponse(InternalFailure):
    kind = 'unparseable_response'
