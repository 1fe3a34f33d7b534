import pytest

import qrest
from qrest import Bignum, Collection, Field, QueryParam, Resource, State


class Fan(Resource, uri="/v1/fans/:id"):
    id = Field(str)
    name = Field(str)
    notify = QueryParam("notify")


class Fans(Collection, uri="/v1/fans/", item=Fan, items_field="fans"):
    total = Field(Bignum)
    page = Field(int)
    next = Field(str)


class MisdeclaredFans(Collection, uri="/v1/fans/", item=Fan,
                      items_field="entries"):
    pass


class BareFans(Collection, uri="/v1/fans/", item=Fan):
    pass


class Song(Resource, uri="/v1/albums/:album/songs/:id"):
    id = Field(str)
    album = Field(str)
    title = Field(str)


class Songs(Collection, uri="/v1/albums/:album/songs/", item=Song):
    album = Field(str)


FANS = {
    "fans": [{"id": "1", "name": "Bonny"}, {"id": "2", "name": "Clyde"}],
    "total": "2",
    "page": 1,
    "next": None,
}


class TestDeclaration:
    def test_items_field_declared(self):
        assert list(Fans.fields) == ["total", "page", "next", "fans"]
        assert Fans.item is Fan
        assert Fans.items_field == "fans"

    def test_bare(self):
        assert BareFans.items_field is None
        assert "items" not in BareFans.fields

    def test_items_field_named_items(self):
        class Things(Collection, uri="/v1/things/", item=Fan,
                     items_field="items"):
            pass

        assert "items" not in Things.fields
        assert callable(Things().items)

    def test_subclass_inherits_schema(self):
        class MoreFans(Fans):
            pass

        assert MoreFans.item is Fan
        assert MoreFans.items_field == "fans"
        assert MoreFans.uri == "/v1/fans/"
        assert "fans" in MoreFans.fields

    def test_items_field_without_item(self):
        with pytest.raises(TypeError, match="item"):
            class Orphans(Collection, items_field="orphans"):
                pass


class TestItems:
    def test_wrapped(self, configured, server):
        server.store("/v1/fans/", FANS)
        fans = Fans.get()
        items = fans.items()
        assert [type(f) for f in items] == [Fan, Fan]
        assert [f.name for f in items] == ["Bonny", "Clyde"]
        assert fans.total == 2
        assert fans.page == 1

    def test_typed_field(self, configured, server):
        server.store("/v1/fans/", FANS)
        fans = Fans.get()
        assert fans.fans[0].name == "Bonny"
        assert fans.fans[0] is fans.items()[0]

    def test_mismatched_items_field(self, configured, server):
        server.store("/v1/fans/", FANS)
        fans = MisdeclaredFans.get()
        with pytest.raises(qrest.ResourceMismatchError, match="entries"):
            fans.items()

    def test_items_field_not_a_list(self, configured, server):
        server.store("/v1/fans/", {"fans": {"id": "1"}})
        fans = Fans.get()
        with pytest.raises(qrest.ResourceMismatchError, match="fans"):
            fans.items()

    def test_bare_array(self, configured, server):
        server.store("/v1/fans/", FANS["fans"])
        fans = BareFans.get()
        assert [f.id for f in fans.items()] == ["1", "2"]
        assert fans.attributes == FANS["fans"]

    def test_bare_array_with_items_field(self, configured, server):
        server.store("/v1/fans/", FANS["fans"])
        fans = Fans.get()
        assert [f.id for f in fans.items()] == ["1", "2"]
        assert fans.fans is None

    def test_bare_array_rejects_field_writes(self, configured, server):
        server.store("/v1/fans/", FANS["fans"])
        fans = Fans.get()
        with pytest.raises(qrest.DataTypeError, match="total") as excinfo:
            fans.total = 3
        assert excinfo.value.field == "total"
        assert fans.attributes == FANS["fans"]

    def test_refreshed_item_keeps_siblings(self, configured, server):
        server.store("/v1/fans/", FANS)
        server.store("/v1/fans/1", {"id": "1", "name": "Bonnie"})
        fans = Fans.get()
        first, second = fans.items()
        first.get()
        assert first.name == "Bonnie"
        assert fans.items()[1] is second
        assert fans.fans[1] is second

    def test_object_without_items_field(self, configured, server):
        server.store("/v1/fans/", FANS)
        with pytest.raises(qrest.ResourceMismatchError, match="bare array"):
            BareFans.get().items()

    def test_no_data(self):
        with pytest.raises(qrest.NoData):
            Fans().items()

    def test_failed_fetch_is_no_data(self, configured, server):
        server.reply("GET", "/v1/fans/", 500)
        fans = Fans()
        with pytest.raises(qrest.RequestFailed):
            fans.get()
        with pytest.raises(qrest.NoData):
            fans.items()

    def test_items_not_objects(self, configured, server):
        server.store("/v1/fans/", ["1", "2"])
        with pytest.raises(qrest.DataTypeError):
            BareFans.get().items()

    def test_scalar_body(self, configured, server):
        server.store("/v1/fans/", "nope")
        with pytest.raises(qrest.DataTypeError):
            Fans.get()

    def test_not_cached_stale(self, configured, server):
        server.store("/v1/fans/", FANS)
        fans = Fans.get()
        assert len(fans.items()) == 2
        fans.attributes = {"fans": [{"id": "3"}]}
        assert [f.id for f in fans.items()] == ["3"]

    def test_mutation_through_items(self, configured, server):
        server.store("/v1/fans/", FANS)
        fans = Fans.get()
        fans.items()[0].name = "Dora"
        assert fans.items()[0].name == "Dora"
        assert fans.attributes["fans"][0] == {"id": "1", "name": "Dora"}

    def test_path_from_attributes(self, configured, server):
        server.store("/v1/albums/10/songs/", [{"id": "5", "album": "10"}])
        songs = Songs.get({"album": "10"})
        song, = songs.items()
        assert song.resolved_path == "/v1/albums/10/songs/5"


class TestPost:
    def test_post_mapping(self, configured, server):
        server.reply("POST", "/v1/fans/", 203, {"id": "13", "name": "Dmitri"})
        fan = Fans().post({"name": "Dmitri"})
        assert type(fan) is Fan
        assert fan.id == "13"
        assert fan.name == "Dmitri"
        assert fan.status == 203
        assert fan.state is State.SYNCED
        assert server.requests[0].content == b'{"name": "Dmitri"}'

    def test_post_on_class(self, configured, server):
        server.reply("POST", "/v1/fans/", 203, {"id": "13", "name": "Dmitri"})
        fan = Fans.post({"name": "Dmitri"})
        assert fan.id == "13"
        assert fan.name == "Dmitri"

    def test_post_instance_with_query_params(self, configured, server):
        server.reply("POST", "/v1/fans/?notify=true", 200, {"id": "14"})
        member = Fan(name="Ilse", notify=True)
        fan = Fans.post(member)
        assert fan is not member
        assert fan.id == "14"
        assert fan.query_params == {"notify": "true"}
        assert member.id is None

    def test_post_merges_collection_query_params(self, configured, server):
        server.reply("POST", "/v1/fans/?page=2&notify=false", 200, {})
        fans = Fans()
        fans.query_params["page"] = "2"
        fans.post(Fan(notify=False))
        assert server.requests[0].url.endswith("/v1/fans/?page=2&notify=false")

    def test_post_failed(self, configured, server):
        server.reply("POST", "/v1/fans/", 409, {"description": "exists"})
        with pytest.raises(qrest.RequestFailed, match="exists") as excinfo:
            Fans.post({"name": "Dmitri"})
        fan = excinfo.value.context
        assert isinstance(fan, Fan)
        assert fan.error == {"description": "exists"}
        assert fan.attributes == {}

    def test_post_with_placeholders_on_class(self, configured, server):
        with pytest.raises(qrest.UriError, match="Songs"):
            Songs.post({"title": "Hello"})
        assert server.requests == []

    def test_post_with_placeholders_on_instance(self, configured, server):
        server.reply("POST", "/v1/albums/10/songs/", 201,
                     {"id": "6", "album": "10", "title": "Hello"})
        song = Songs(album="10").post({"title": "Hello"})
        assert song.id == "6"

    def test_post_options(self, configured, server):
        other = qrest.Client("other.local", session=server)
        server.reply("POST", "/v1/fans/", 201, {"id": "15"})
        Fans.post({"name": "X"}, client=other, not_authorized=True)
        request, = server.requests
        assert request.url == "https://other.local:8000/v1/fans/"
        assert "Authorization" not in request.headers

    def test_post_without_uri(self, configured, server):
        class Unaddressed(Collection, item=Fan):
            pass

        with pytest.raises(qrest.UriError, match="Unaddressed"):
            Unaddressed().post({"name": "X"})
        assert server.requests == []
