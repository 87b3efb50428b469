AI_GENERATE_TXT_JSON_PARSE_ERROR = "Invalid Json"
AI_GENERATE_TXT_INVALID_PROTOCOL_ERROR = "Invalid Protocol, use https"
AI_GENERATE_TXT_UNSUPPORTED_ENDPOINT_ERROR = "Unsupported Endpoint"
AI_GENERATE_TXT_INVALID_PROMPT_ERROR = "Invalid Prompt, cannot be null or empty"
AI_GENERATE_TXT_MSG_OVERRIDE_FORBIDDEN_ERROR = "Invalid override, 'messages' cannot be overriden"


class AiGenError(Exception):
    pass

class ConfigError(AiGenError):
    pass


class AiFunctionError(AiGenError):
    """A failure that becomes the string outcome of a generate call."""

    # Caller input problems log at WARNING, upstream/infra problems at ERROR.
    caller_error = True
    default_message = ""

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)

class InvalidJsonError(AiFunctionError):
    default_message = AI_GENERATE_TXT_JSON_PARSE_ERROR

class ResponseParseError(AiFunctionError):
    caller_error = False
    default_message = AI_GENERATE_TXT_JSON_PARSE_ERROR

class InvalidProtocolError(AiFunctionError):
    default_message = AI_GENERATE_TXT_INVALID_PROTOCOL_ERROR

class UnsupportedEndpointError(AiFunctionError):
    default_message = AI_GENERATE_TXT_UNSUPPORTED_ENDPOINT_ERROR

class InvalidPromptError(AiFunctionError):
    default_message = AI_GENERATE_TXT_INVALID_PROMPT_ERROR

class MessagesOverrideError(AiFunctionError):
    default_message = AI_GENERATE_TXT_MSG_OVERRIDE_FORBIDDEN_ERROR

class SecretResolutionError(AiFunctionError):
    caller_error = False

class TransportError(AiFunctionError):
    caller_error = False
