from invoicing.services.page_cache import PageCache


def test_get_or_render_caches_per_variant():
    cache = PageCache()
    calls = []

    def render(v):
        def _r():
            calls.append(v)
            return {"v": v}
        return _r

    assert cache.get_or_render("/a", "p1", render(1)) == {"v": 1}
    assert cache.get_or_render("/a", "p1", render(2)) == {"v": 1}
    assert cache.get_or_render("/a", "p2", render(3)) == {"v": 3}
    assert calls == [1, 3]
    assert cache.stats()["hits"] == 1
    assert cache.stats()["entries"] == 2


def test_revalidate_drops_only_that_path():
    cache = PageCache()
    cache.get_or_render("/a", "p1", lambda: 1)
    cache.get_or_render("/a", "p2", lambda: 2)
    cache.get_or_render("/b", "p1", lambda: 3)

    assert cache.revalidate_path("/a") == 2
    assert cache.get_or_render("/a", "p1", lambda: 10) == 10
    assert cache.get_or_render("/b", "p1", lambda: 30) == 3
    assert cache.stats()["revalidations"] == 1


def test_disabled_cache_always_renders():
    cache = PageCache(enabled=False)
    assert cache.get_or_render("/a", "p", lambda: 1) == 1
    assert cache.get_or_render("/a", "p", lambda: 2) == 2
    assert cache.stats()["entries"] == 0


def test_render_overlapping_revalidate_is_not_stored():
    cache = PageCache()

    def render_then_write_lands():
        # a create commits and revalidates while this page is being built
        cache.revalidate_path("/dashboard/invoices")
        return "rows-before-write"

    assert cache.get_or_render("/dashboard/invoices", "p1", render_then_write_lands) == "rows-before-write"
    assert cache.get_or_render("/dashboard/invoices", "p1", lambda: "rows-after-write") == "rows-after-write"
    assert cache.get_or_render("/dashboard/invoices", "p1", lambda: "later") == "rows-after-write"


def test_render_overlapping_clear_is_not_stored():
    cache = PageCache()

    def render_then_clear():
        cache.clear()
        return "old-settings"

    cache.get_or_render("/a", "p", render_then_clear)
    assert cache.get_or_render("/a", "p", lambda: "new-settings") == "new-settings"


def test_revalidate_of_other_path_keeps_render():
    cache = PageCache()

    def render():
        cache.revalidate_path("/b")
        return 1

    cache.get_or_render("/a", "p", render)
    assert cache.get_or_render("/a", "p", lambda: 2) == 1
