"""
Sanctum upgrades, starting player, audio sinks and settings.
"""

import logging

import pytest

from packages.speller.audio import AudioSink, Bgm, NullAudio, RecordingAudio, SafeAudio, Sfx
from packages.speller.content.acts import get_act_config
from packages.speller.content.packs import DEFAULT_PACK_ID, PRESET_PACKS, get_pack
from packages.speller.content.sanctum import SANCTUM_UPGRADES, get_upgrade, starting_player
from packages.speller.settings import Settings, load_settings


class TestSanctum:

    def test_catalog(self):
        assert [u.id for u in SANCTUM_UPGRADES] == [
            "bonus_hp", "bonus_gold", "bonus_energy", "bonus_str", "bonus_revive", "shop_discount",
        ]
        assert get_upgrade("bonus_revive").cost == 500
        assert get_upgrade("nope") is None

    def test_default_player(self):
        player = starting_player()
        assert (player.hp, player.max_hp, player.gold) == (70, 70, 0)
        assert player.max_energy == 3
        assert player.revivals == 0
        assert player.shop_discount == 0.0

    def test_all_unlocks(self):
        player = starting_player([u.id for u in SANCTUM_UPGRADES])
        assert (player.hp, player.max_hp) == (85, 85)
        assert player.gold == 100
        assert player.energy == player.max_energy == 4
        assert player.status.strength == 1
        assert player.revivals == 1
        assert player.shop_discount == pytest.approx(0.2)


class TestContentCatalogs:

    def test_packs(self):
        assert get_pack(DEFAULT_PACK_ID) is not None
        for pack in PRESET_PACKS:
            assert len(pack.words) == 15
            assert len({w.id for w in pack.words}) == 15
            assert all(w.proficiency == 0 for w in pack.words)

    def test_vocab_list_is_a_copy(self):
        pack = get_pack(DEFAULT_PACK_ID)
        words = pack.vocab_list()
        words.clear()
        assert len(pack.vocab_list()) == 15

    def test_unknown_act_falls_back(self):
        assert get_act_config(9) == get_act_config(1)
        assert get_act_config(3).price_multiplier == 1.5


class ExplodingAudio(AudioSink):

    def play_sfx(self, kind):
        raise RuntimeError("no sound device")


class TestAudio:

    def test_recording(self):
        audio = RecordingAudio()
        audio.speak_word("cat")
        audio.play_sfx(Sfx.SUCCESS)
        audio.play_bgm(Bgm.BOSS)
        audio.stop_bgm()
        assert audio.calls == [
            ("speak_word", "cat"), ("play_sfx", "success"), ("play_bgm", "BOSS"), ("stop_bgm", None),
        ]
        assert audio.sfx() == ["success"]

    def test_null_audio_is_silent(self):
        NullAudio().play_sfx(Sfx.ERROR)

    def test_safe_audio_forwards(self):
        sink = RecordingAudio()
        SafeAudio(sink).speak_word("ocean")
        assert sink.calls == [("speak_word", "ocean")]

    def test_safe_audio_logs_failures(self, caplog):
        with caplog.at_level(logging.WARNING):
            SafeAudio(ExplodingAudio()).play_sfx(Sfx.ATTACK)
        assert "Audio sink failed" in caplog.text


class TestSettings:

    def test_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SPELLER_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("SPELLER_PORT", "9000")
        monkeypatch.setenv("SPELLER_LOG_LEVEL", "debug")
        settings = load_settings(env_file=str(tmp_path / "missing.env"))
        assert settings.data_dir == tmp_path
        assert settings.profiles_dir == tmp_path / "profiles"
        assert settings.port == 9000
        assert settings.log_level == "DEBUG"

    def test_env_file(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SPELLER_HOST", "unset")
        monkeypatch.delenv("SPELLER_HOST")
        env_file = tmp_path / ".env"
        env_file.write_text("SPELLER_HOST=0.0.0.0\n", encoding="utf-8")
        settings = load_settings(env_file=str(env_file))
        assert settings.host == "0.0.0.0"

    def test_defaults(self):
        assert Settings().port == 8080
