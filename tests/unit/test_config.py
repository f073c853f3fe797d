from datetime import timedelta


def test_load_config_builds_runtime_settings(app_config, tmp_path):
    assert app_config.asset_paths.root == tmp_path / "assets"
    assert app_config.asset_paths.scratch == tmp_path / "assets" / "scratch"
    assert app_config.asset_paths.scratch.is_dir()
    assert app_config.video_limits.max_bytes == 1 << 30
    assert app_config.thumbnail_limits.accepted_content_types == ("image/jpeg", "image/png")
    assert app_config.thumbnail_limits.max_bytes == 10 << 20
    assert app_config.signed_url_ttl == timedelta(hours=1)
    assert app_config.object_store.backend == "local"
    assert app_config.media_process_timeout_seconds is None


def test_settings_read_prefixed_environment(monkeypatch, make_settings):
    monkeypatch.setenv("TUBELY_SIGNED_URL_TTL_SECONDS", "120")
    monkeypatch.setenv("TUBELY_FFMPEG_PATH", "/opt/ffmpeg/bin/ffmpeg")

    settings = make_settings()

    assert settings.signed_url_ttl_seconds == 120
    assert settings.ffmpeg_path == "/opt/ffmpeg/bin/ffmpeg"
