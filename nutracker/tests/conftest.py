import pytest


@pytest.fixture(autouse=True)
def config_dir(tmp_path, monkeypatch):
    path = tmp_path / "config"
    monkeypatch.setenv("NU_TRACKER_CONFIG_DIR", str(path))
    return path


@pytest.fixture
def gh_issue():
    def make(number, title, body="", labels=(), assignees=(), author="matatk", repository="w3c/apa"):
        return {
            "number": number,
            "title": title,
            "body": body,
            "labels": [{"name": name} for name in labels],
            "assignees": [{"login": login} for login in assignees],
            "author": {"login": author},
            "repository": {"nameWithOwner": repository},
        }
    return make
