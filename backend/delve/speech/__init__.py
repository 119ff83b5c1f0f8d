"""
Speech output for Dungeon Delve (Eleven Labs text-to-speech)
"""

from delve.speech.elevenlabs import ElevenLabsClient, TextToSpeechRequest, VoiceSettings

__all__ = ["ElevenLabsClient", "TextToSpeechRequest", "VoiceSettings"]
