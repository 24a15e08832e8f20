from core.container import Container, singleton


def test_singleton_factories_are_created_once():
    container = Container()
    created = []

    @singleton
    def create_matcher():
        created.append(object())
        return created[-1]

    container.register_singleton("matcher", create_matcher)

    assert container.get("matcher") is container.get("matcher")
    assert len(created) == 1


def test_plain_factories_create_new_instances():
    container = Container()
    container.register_factory("report", dict)

    assert container.get("report") is not container.get("report")


def test_factories_can_resolve_other_services():
    container = Container()
    container.register_instance("threshold", 0.85)
    container.register_factory("settings", lambda: {"threshold": container.get("threshold")})

    assert container.get("settings") == {"threshold": 0.85}
