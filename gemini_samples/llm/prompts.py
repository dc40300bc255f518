"""Fixed inputs for the sample request modes."""

from gemini_samples.llm.models import Content, model_turn, user_turn


DEFAULT_MODEL = "gemini-1.5-flash"

TEXT_PROMPT = "ONEPIECEの作者は？"

IMAGE_FORMAT = "png"
IMAGE_FILES = ("onepiece01_luffy.png", "onepiece02_zoro_bandana.png")
IMAGE_INSTRUCTION = "２つの画像の違いを教えて"

CHAT_MESSAGE = "その中で小さいのはどちらですか？"

STREAM_PROMPT = "モンキー・D・ルフィが食べた悪魔の実について説明して"


def chat_history() -> list[Content]:
    """Return a fresh copy of the seeded conversation."""
    return [
        user_turn("こんにちは、赤い果物は何がありますか？"),
        model_turn("いちごやりんごがあります。"),
    ]
