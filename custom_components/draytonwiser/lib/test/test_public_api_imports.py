import wiserheat_lib


def test_public_api_exports_resolve() -> None:
    for name in wiserheat_lib.__all__:
        assert hasattr(wiserheat_lib, name), name


def test_errors_share_a_base() -> None:
    assert issubclass(wiserheat_lib.WiserAuthError, wiserheat_lib.WiserError)
    assert issubclass(wiserheat_lib.WiserTimeoutError, wiserheat_lib.WiserConnectionError)
    assert issubclass(wiserheat_lib.WiserParseError, wiserheat_lib.WiserError)
