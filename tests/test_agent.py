import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from agent.agent import TextResponder, UnavailableResponder, build_chain, build_llm, build_responder
from agent.core.prompt import SYSTEM_PROMPT, build_policy
from config.settings import Settings
from game.catalog import LOCATIONS


def test_policy_names_forbidden_words_and_clue():
    entry = LOCATIONS.get(2)
    policy = build_policy(entry)
    assert policy.startswith(SYSTEM_PROMPT)
    assert entry.clue in policy
    assert '"golden hinde"' in policy and '"hinde"' in policy


def test_policy_only_mentions_current_location():
    policy = build_policy(LOCATIONS.get(0))
    assert "monument" not in policy
    assert "hawksmoor" not in policy


def test_text_responder_strips_model_output():
    chain = build_chain(FakeListChatModel(responses=["  Head towards the bank.  "]))
    responder = TextResponder(chain)
    assert responder("policy text", "where now?") == "Head towards the bank."


def test_chain_prompt_carries_policy_and_message():
    chain = build_chain(FakeListChatModel(responses=["ok"]))
    prompt_value = chain.first.invoke({"policy": "be brief", "message": "hello"})
    messages = prompt_value.to_messages()
    assert messages[0].type == "system" and messages[0].content == "be brief"
    assert messages[1].type == "human" and messages[1].content == "hello"


def test_build_responder_requires_api_key():
    settings = Settings()
    settings.google_api_key = None
    with pytest.raises(RuntimeError):
        build_responder(settings)


def test_unavailable_responder_always_fails():
    responder = UnavailableResponder("no key")
    with pytest.raises(RuntimeError, match="no key"):
        responder("policy", "message")


def test_build_llm_applies_budget_and_timeout():
    settings = Settings()
    settings.google_api_key = "test-key"
    settings.max_output_tokens = 64
    settings.responder_timeout = 7.5
    settings.responder_max_retries = 2
    settings.temperature = 0.2

    llm = build_llm(settings)
    assert llm.max_output_tokens == 64
    assert llm.timeout == 7.5
    assert llm.max_retries == 2
    assert llm.temperature == 0.2
