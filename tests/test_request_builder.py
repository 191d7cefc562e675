import pytest

import evocaition as mod


def test_chat_payload_contains_prompt_verbatim():
    prompt = "  What is \"2+2\"?\n"
    req = mod.build_request(prompt, model_id="m")
    payload = mod.request_payload(req)
    assert payload == {
        "model": "m",
        "messages": [{"role": "user", "content": prompt}],
        "stream": False,
    }


def test_plain_payload_places_prompt_directly():
    req = mod.build_request("2+2=", mode="completion", model_id="m")
    payload = mod.request_payload(req, stream=True)
    assert payload == {"model": "m", "prompt": "2+2=", "stream": True}
    assert "messages" not in payload


def test_sampling_fields_are_mapped_and_absent_ones_omitted():
    req = mod.build_request(
        "hi",
        model_id="m",
        sampling={"max_tokens": 32, "temperature": 0.5, "top_k": None, "repetition_penalty": 1.1, "seed": 7},
    )
    payload = mod.request_payload(req)
    assert payload["max_tokens"] == 32
    assert payload["temperature"] == 0.5
    assert payload["repetition_penalty"] == 1.1
    assert payload["seed"] == 7
    for field in ("top_k", "top_p", "min_p"):
        assert field not in payload


def test_empty_sampling_is_normalized_to_none():
    req = mod.build_request("hi", model_id="m", sampling={"temperature": None})
    assert req.sampling is None


@pytest.mark.parametrize("prompt", ["", "   ", "\n\t"])
def test_empty_prompt_rejected(prompt):
    with pytest.raises(mod.EmptyPromptError):
        mod.build_request(prompt)


def test_image_with_plain_mode_fails_before_resolving():
    def resolver(ref):
        raise AssertionError("image must not be resolved")

    with pytest.raises(mod.UnsupportedCombinationError):
        mod.build_request("describe", mode="completion", image="cat.png", image_resolver=resolver)


def test_chat_payload_with_inline_image():
    image = mod.InlineImage(mime_type="image/png", data="AAAA")
    req = mod.build_request("describe", model_id="m", image=image)
    message = mod.request_payload(req)["messages"]
    assert len(message) == 1
    assert message[0]["content"] == [
        {"type": "text", "text": "describe"},
        {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAAA"}},
    ]


def test_image_string_goes_through_resolver():
    seen = []

    def resolver(ref):
        seen.append(ref)
        return mod.RemoteImage(url="https://example.com/a.jpg")

    req = mod.build_request("describe", model_id="m", image="whatever", image_resolver=resolver)
    assert seen == ["whatever"]
    content = mod.request_payload(req)["messages"][0]["content"]
    assert content[1]["image_url"]["url"] == "https://example.com/a.jpg"


def test_model_id_defaults_from_env(monkeypatch):
    assert mod.build_request("hi").model_id == mod.DEFAULT_MODEL_ID
    monkeypatch.setenv("EVOCAITION_MODEL_ID", "local/llama")
    assert mod.build_request("hi").model_id == "local/llama"


def test_request_is_immutable():
    req = mod.build_request("hi", model_id="m")
    with pytest.raises(AttributeError):
        req.prompt = "other"


def test_unknown_mode_rejected():
    with pytest.raises(ValueError):
        mod.build_request("hi", mode="edit")
