"""
tests/shared/vsphere/test_vsphere_tagging.py - CIS Tagging REST 클라이언트 테스트

requests.Session을 모킹하여 요청 형식과 응답 처리를 검증합니다.
"""

from unittest.mock import MagicMock

import pytest
import requests

from core.exceptions import TagServiceError
from shared.vsphere.tagging import CisTaggingClient
from shared.vsphere.types import EntityRef, Tag, TagAssignment, TagCategory

BASE_URL = "https://vcsa.test"

CATEGORY = TagCategory(id="cat-1", name="tc_esxi_release_names")
HOST = EntityRef(type="HostSystem", id="host-10", name="esx01")


def _response(body=None, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.content = b"" if body is None else b"x"
    response.json.return_value = body
    if status_code >= 400:
        error = requests.HTTPError(f"{status_code} Error", response=response)
        response.raise_for_status.side_effect = error
    return response


def _router(routes):
    """(method, path, action) → 응답 매핑으로 request 모킹"""

    def _request(method, url, params=None, json=None, timeout=None):
        path = url.replace(f"{BASE_URL}/api/cis/tagging", "")
        action = (params or {}).get("action")
        key = (method, path, action)
        if key not in routes:
            raise AssertionError(f"unexpected request: {key}")
        return routes[key]

    return _request


@pytest.fixture
def http():
    return MagicMock(spec=requests.Session)


class TestCategories:
    """카테고리 조회/생성 테스트"""

    def test_get_category_by_name(self, http):
        """이름이 일치하는 카테고리 반환"""
        http.request.side_effect = _router(
            {
                ("GET", "/category", None): _response(["cat-1", "cat-2"]),
                ("GET", "/category/cat-1", None): _response({"id": "cat-1", "name": "other"}),
                ("GET", "/category/cat-2", None): _response(
                    {
                        "id": "cat-2",
                        "name": "tc_esxi_release_names",
                        "cardinality": "SINGLE",
                        "associable_types": ["HostSystem"],
                    }
                ),
            }
        )
        client = CisTaggingClient(http, BASE_URL)

        category = client.get_category("tc_esxi_release_names")

        assert category == TagCategory(
            id="cat-2",
            name="tc_esxi_release_names",
            cardinality="SINGLE",
            associable_types=("HostSystem",),
        )

    def test_get_category_missing(self, http):
        """없으면 None"""
        http.request.side_effect = _router({("GET", "/category", None): _response([])})
        assert CisTaggingClient(http, BASE_URL).get_category("x") is None

    def test_create_category_payload(self, http):
        """생성 요청 본문"""
        http.request.return_value = _response("cat-9")
        client = CisTaggingClient(http, BASE_URL + "/", timeout=12)

        category = client.create_category("tc_esxi_release_names", "SINGLE", "desc", ("HostSystem",))

        method, url = http.request.call_args.args
        kwargs = http.request.call_args.kwargs
        assert (method, url) == ("POST", f"{BASE_URL}/api/cis/tagging/category")
        assert kwargs["json"] == {
            "name": "tc_esxi_release_names",
            "description": "desc",
            "cardinality": "SINGLE",
            "associable_types": ["HostSystem"],
        }
        assert kwargs["timeout"] == 12
        assert category.id == "cat-9"


class TestTags:
    """태그 조회/생성 테스트"""

    def test_get_tag_in_category(self, http):
        """카테고리 범위 조회는 list-tags-for-category 사용"""
        http.request.side_effect = _router(
            {
                ("POST", "/tag", "list-tags-for-category"): _response(["tag-1"]),
                ("GET", "/tag/tag-1", None): _response(
                    {"id": "tag-1", "name": "no_matching_release", "category_id": "cat-1"}
                ),
            }
        )
        client = CisTaggingClient(http, BASE_URL)

        tag = client.get_tag("no_matching_release", CATEGORY)

        assert tag == Tag(id="tag-1", name="no_matching_release", category_id="cat-1")
        list_call = http.request.call_args_list[0]
        assert list_call.kwargs["json"] == {"category_id": "cat-1"}

    def test_get_tag_any_category(self, http):
        """카테고리 없이 전체 태그에서 조회"""
        http.request.side_effect = _router(
            {
                ("GET", "/tag", None): _response(["tag-1", "tag-2"]),
                ("GET", "/tag/tag-1", None): _response({"id": "tag-1", "name": "a", "category_id": "cat-5"}),
                ("GET", "/tag/tag-2", None): _response({"id": "tag-2", "name": "b", "category_id": "cat-6"}),
            }
        )
        client = CisTaggingClient(http, BASE_URL)

        assert client.get_tag("b").category_id == "cat-6"
        assert client.get_tag("missing") is None

    def test_created_tag_cached(self, http):
        """생성한 태그는 캐시에서 조회"""
        http.request.return_value = _response("tag-7")
        client = CisTaggingClient(http, BASE_URL)

        created = client.create_tag("ESXi_7.0_Update_3g", CATEGORY, "ESXi 7.0 Update 3g - build: 20036589")
        http.request.reset_mock()

        assert client.get_tag("ESXi_7.0_Update_3g", CATEGORY) == created
        http.request.assert_not_called()

    def test_create_tag_payload(self, http):
        http.request.return_value = _response("tag-7")

        CisTaggingClient(http, BASE_URL).create_tag("x", CATEGORY, "d")

        assert http.request.call_args.kwargs["json"] == {"name": "x", "description": "d", "category_id": "cat-1"}


class TestAssignments:
    """태그 할당 테스트"""

    def test_get_assignment_filters_category(self, http):
        """카테고리에 속한 할당만 반환"""
        http.request.side_effect = _router(
            {
                ("POST", "/tag-association", "list-attached-tags"): _response(["tag-a", "tag-b"]),
                ("GET", "/tag/tag-a", None): _response({"id": "tag-a", "name": "owner", "category_id": "cat-x"}),
                ("GET", "/tag/tag-b", None): _response({"id": "tag-b", "name": "7.0_U3", "category_id": "cat-1"}),
            }
        )
        client = CisTaggingClient(http, BASE_URL)

        assignment = client.get_assignment(CATEGORY, HOST)

        assert assignment.tag.name == "7.0_U3"
        assert assignment.entity == HOST
        assert http.request.call_args_list[0].kwargs["json"] == {
            "object_id": {"type": "HostSystem", "id": "host-10"}
        }

    def test_get_assignment_none(self, http):
        http.request.side_effect = _router({("POST", "/tag-association", "list-attached-tags"): _response([])})
        assert CisTaggingClient(http, BASE_URL).get_assignment(CATEGORY, HOST) is None

    def test_attach_and_detach(self, http):
        """attach / detach 요청 형식 (204 응답)"""
        http.request.return_value = _response(status_code=204)
        client = CisTaggingClient(http, BASE_URL)
        tag = Tag(id="tag-b", name="7.0_U3", category_id="cat-1")

        assignment = client.create_assignment(tag, HOST)
        client.remove_assignment(assignment)

        attach, detach = http.request.call_args_list
        assert attach.args == ("POST", f"{BASE_URL}/api/cis/tagging/tag-association/tag-b")
        assert attach.kwargs["params"] == {"action": "attach"}
        assert detach.kwargs["params"] == {"action": "detach"}
        assert detach.kwargs["json"] == {"object_id": {"type": "HostSystem", "id": "host-10"}}
        assert assignment == TagAssignment(tag=tag, entity=HOST)


class TestErrors:
    """오류 변환 테스트"""

    def test_http_error_wrapped(self, http):
        """HTTP 오류는 TagServiceError (상태 코드 + vCenter 메시지)"""
        http.request.return_value = _response(
            {"error_type": "UNAUTHORIZED", "messages": [{"default_message": "Permission denied"}]},
            status_code=403,
        )

        with pytest.raises(TagServiceError) as exc_info:
            CisTaggingClient(http, BASE_URL).create_assignment(Tag("t", "n", "c"), HOST)

        error = exc_info.value
        assert error.status_code == 403
        assert error.operation == "attach"
        assert error.error_message == "Permission denied"
        assert "tagging.attach" in str(error)

    def test_connection_error_wrapped(self, http):
        """연결 오류는 상태 코드 없이 래핑, 재시도 없음"""
        http.request.side_effect = requests.ConnectionError("reset by peer")

        with pytest.raises(TagServiceError) as exc_info:
            CisTaggingClient(http, BASE_URL).get_category("x")

        assert exc_info.value.status_code is None
        assert http.request.call_count == 1

    def test_invalid_json(self, http):
        """JSON 파싱 실패"""
        response = _response(["x"])
        response.json.side_effect = ValueError("bad")
        http.request.return_value = response

        with pytest.raises(TagServiceError, match="JSON"):
            CisTaggingClient(http, BASE_URL).get_category("x")
