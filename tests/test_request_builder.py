import json

import pytest

from src.aigen.config import AiSettings
from src.aigen.errors import (
    InvalidJsonError,
    InvalidPromptError,
    InvalidProtocolError,
    MessagesOverrideError,
    SecretResolutionError,
    UnsupportedEndpointError,
)
from src.aigen.request_builder import (
    build_base_payload,
    merge_overrides,
    prepare_request,
    render_dry_run,
)
from src.aigen.secret_store import EnvSecretResolver
from src.aigen.types import AiConfig, GenerateTextParams

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"

def _settings():
    return AiSettings(AiConfig(endpoint=DEFAULT_ENDPOINT, model="gpt-4o-mini"), api_key="sk-default")

def _secrets():
    return EnvSecretResolver({"team-key": "sk-team"})

def _prepare(**kw):
    return prepare_request(GenerateTextParams(**kw), _settings(), _secrets())

def test_defaults_fill_endpoint_model_and_key():
    pr = _prepare(prompt="hello")
    assert pr.endpoint == DEFAULT_ENDPOINT
    assert pr.headers == {"Content-Type": "application/json", "Authorization": "Bearer sk-default"}
    assert json.loads(pr.payload) == {
        "model": "gpt-4o-mini",
        "messages": [{"role": "user", "content": "hello"}],
    }

def test_supplied_values_win_over_defaults():
    endpoint = "https://res.openai.azure.com/openai/deployments/d/chat/completions"
    pr = _prepare(prompt="hi", endpoint=endpoint, model="gpt-4o", api_key_secret="team-key")
    assert pr.endpoint == endpoint
    assert pr.headers["Authorization"] == "Bearer sk-team"
    assert json.loads(pr.payload)["model"] == "gpt-4o"

def test_configured_endpoint_is_not_validated():
    settings = AiSettings(AiConfig(endpoint="http://localhost:8080/v1/chat/completions"))
    pr = prepare_request(GenerateTextParams(prompt="hi"), settings, _secrets())
    assert pr.endpoint == "http://localhost:8080/v1/chat/completions"

def test_protocol_is_checked_before_support():
    with pytest.raises(InvalidProtocolError):
        _prepare(prompt="hi", endpoint="http://example.com")

def test_unsupported_endpoint():
    with pytest.raises(UnsupportedEndpointError):
        _prepare(prompt="hi", endpoint="https://example.com/v1/chat/completions")

def test_endpoint_error_comes_before_prompt_error():
    with pytest.raises(InvalidProtocolError):
        _prepare(prompt="", endpoint="http://api.openai.com")

def test_secret_failure_comes_before_prompt_error():
    with pytest.raises(SecretResolutionError) as ei:
        _prepare(prompt=None, api_key_secret="missing-key")
    assert "missing-key" in ei.value.message

@pytest.mark.parametrize("prompt", [None, ""])
def test_invalid_prompt_even_with_valid_everything_else(prompt):
    with pytest.raises(InvalidPromptError):
        _prepare(
            prompt=prompt,
            endpoint=DEFAULT_ENDPOINT,
            model="gpt-4o",
            api_key_secret="team-key",
            params='{"temperature":0.2}',
        )

def test_overrides_add_and_replace_fields():
    pr = _prepare(prompt="hi", params='{"model":"gpt-4o","temperature":0.2,"max_tokens":64}')
    payload = json.loads(pr.payload)
    assert payload["model"] == "gpt-4o"
    assert payload["temperature"] == 0.2
    assert payload["max_tokens"] == 64
    assert payload["messages"] == [{"role": "user", "content": "hi"}]

def test_merge_is_idempotent_in_field_identity():
    base = build_base_payload("hi", None, _settings())
    once = merge_overrides(base, '{"temperature":0.5}')
    twice = merge_overrides(once, '{"temperature":0.5}')
    assert twice == once
    assert list(twice.keys()) == ["model", "messages", "temperature"]
    assert twice["temperature"] == 0.5

def test_merge_does_not_touch_the_base_payload():
    base = build_base_payload("hi", None, _settings())
    merge_overrides(base, '{"temperature":0.5}')
    assert "temperature" not in base

@pytest.mark.parametrize("params", [
    '{"messages":[]}',
    '{"temperature":0.2,"messages":[{"role":"user","content":"x"}]}',
    '{"top_p":1,"stream":false,"messages":null}',
])
def test_messages_override_is_forbidden(params):
    with pytest.raises(MessagesOverrideError):
        _prepare(prompt="hi", params=params)

@pytest.mark.parametrize("params", [
    '{"temperature":0.2,}',
    "{temperature: 0.2}",
    '{"temperature": NaN}',
    "[1, 2]",
    '"just a string"',
    "not json",
])
def test_invalid_override_json(params):
    with pytest.raises(InvalidJsonError):
        _prepare(prompt="hi", params=params)

def test_empty_override_string_is_ignored():
    pr = _prepare(prompt="hi", params="")
    assert set(json.loads(pr.payload)) == {"model", "messages"}

def test_payload_is_compact_and_keeps_unicode():
    pr = _prepare(prompt="안녕", params='{"temperature":0.2}')
    assert pr.payload == (
        '{"model":"gpt-4o-mini","messages":[{"role":"user","content":"안녕"}],"temperature":0.2}'
    )

def test_render_dry_run_lists_endpoint_headers_then_payload():
    pr = _prepare(prompt="hello", params='{"temperature":0.2}')
    lines = render_dry_run(pr).split("\n")
    assert lines == [
        DEFAULT_ENDPOINT,
        "Content-Type: application/json",
        "Authorization: Bearer sk-default",
        pr.payload,
    ]

def test_lone_surrogate_override_is_invalid_json():
    with pytest.raises(InvalidJsonError):
        _prepare(prompt="hi", params='{"stop":"\\ud800"}')

def test_lone_surrogate_prompt_is_invalid_json():
    with pytest.raises(InvalidJsonError):
        _prepare(prompt="hi \ud800")

@pytest.mark.parametrize("params", ['{"max_tokens":1e400}', '{"temperature":-1e999}'])
def test_overflowing_number_override_is_invalid_json(params):
    with pytest.raises(InvalidJsonError):
        _prepare(prompt="hi", params=params)

def test_deeply_nested_override_is_invalid_json():
    params = '{"a":' + "[" * 100000 + "]" * 100000 + "}"
    with pytest.raises(InvalidJsonError):
        _prepare(prompt="hi", params=params)

def test_messages_check_runs_before_serialization():
    with pytest.raises(MessagesOverrideError):
        _prepare(prompt="hi", params='{"max_tokens":1e400,"messages":[]}')
