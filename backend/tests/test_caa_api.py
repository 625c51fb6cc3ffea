"""
Tests for the CAA, ad generation and brief-assist endpoints.

LLM-backed services are patched at the router module, so no provider is
contacted.
"""
from unittest.mock import AsyncMock, patch

from briefboarder.schemas.caa import CAAResponse, CAAResult, GeneratedAd, Postit, TrickRef
from briefboarder.services.caa.llm_client import StructuredOutputError
from tests.fixtures.caa_fixtures import make_context


def _caa_body(**kwargs):
    return {"context": make_context(**kwargs).model_dump(by_alias=True)}


class TestCAAEndpoint:
    def test_returns_result_without_unset_keys(self, client):
        result = CAAResult(action="answer", postit=Postit(text="Both use warm light."))
        with patch("briefboarder.api.routes_caa.LLMClient") as llm_cls, patch(
            "briefboarder.api.routes_caa.get_approach"
        ) as get_approach:
            get_approach.return_value.execute.return_value = result
            resp = client.post("/api/caa", json=_caa_body(approach="dramatic", images=2))

        assert resp.status_code == 200, resp.text
        assert resp.json() == {"action": "answer", "postit": {"text": "Both use warm light."}}
        get_approach.assert_called_once_with("dramatic")
        llm_cls.assert_called_once_with("test/model")

    def test_end_to_end_with_real_approach(self, client):
        reply = CAAResponse(
            action="edit",
            enhanced_prompt="add the logo bottom left",
            include_assets=["logo"],
            reasoning="user asked for branding",
        )
        with patch("briefboarder.api.routes_caa.LLMClient") as llm_cls:
            llm_cls.return_value.call_with_structured_output.return_value = reply
            llm_cls.return_value.model_id = "test/model"
            resp = client.post("/api/caa", json=_caa_body(images=1))

        assert resp.status_code == 200, resp.text
        assert resp.json() == {
            "action": "edit",
            "enhancedPrompt": "add the logo bottom left",
            "imageInputs": [
                "https://cdn.example.com/briefs/img-0.png",
                "https://cdn.example.com/logo.png",
            ],
            "includeAssets": ["logo"],
        }

    def test_blank_prompt_is_400(self, client):
        resp = client.post("/api/caa", json=_caa_body(user_prompt="   "))
        assert resp.status_code == 400
        assert resp.json()["detail"] == "User prompt is required"

    def test_too_many_images_is_400(self, client):
        resp = client.post("/api/caa", json=_caa_body(images=9))
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Maximum 8 images can be selected"

    def test_eight_images_is_allowed(self, client):
        with patch("briefboarder.api.routes_caa.LLMClient"), patch(
            "briefboarder.api.routes_caa.get_approach"
        ) as get_approach:
            get_approach.return_value.execute.return_value = CAAResult(action="generate")
            resp = client.post("/api/caa", json=_caa_body(images=8))
        assert resp.status_code == 200

    def test_unknown_approach_is_400(self, client):
        resp = client.post("/api/caa", json=_caa_body(approach="ogilvy"))
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Unknown creative approach: ogilvy"

    def test_llm_failure_is_500_with_message(self, client):
        with patch("briefboarder.api.routes_caa.LLMClient"), patch(
            "briefboarder.api.routes_caa.get_approach"
        ) as get_approach:
            get_approach.return_value.execute.side_effect = StructuredOutputError(
                "Failed to get valid structured response after 3 attempts. Last error: bad"
            )
            resp = client.post("/api/caa", json=_caa_body())

        assert resp.status_code == 500
        assert resp.json()["detail"].startswith("Failed to get valid structured response")

    def test_missing_settings_is_400(self, client):
        body = _caa_body()
        del body["context"]["settings"]
        resp = client.post("/api/caa", json=body)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "settings is required"

    def test_list_approaches(self, client):
        resp = client.get("/api/caa/approaches")
        assert resp.status_code == 200
        assert [a["id"] for a in resp.json()] == ["simple", "dramatic", "bernbach"]


class TestGenerateAdEndpoint:
    BODY = {
        "briefName": "Summer Launch",
        "briefDescription": "Sparkling water",
        "approach": "bernbach",
        "availableAssets": [],
        "preferredTypeface": "Futura",
        "settings": {
            "imageGenerationModel": "flux-schnell",
            "imageEditingModel": "nano-banana",
            "caaModel": "test/model",
        },
    }

    def test_success(self, client):
        ad = GeneratedAd(
            image_url="https://cdn.example.com/edited-images/ad.jpg",
            s3_key="edited-images/ad.jpg",
            text_placement="none",
            trick=TrickRef(id="micro-moment", name="The 3-Second Story"),
            reasoning="r",
        )
        with patch(
            "briefboarder.api.routes_caa.generate_ad", new=AsyncMock(return_value=ad)
        ) as gen:
            resp = client.post("/api/generate-ad", json=self.BODY)

        assert resp.status_code == 200, resp.text
        assert resp.json() == {
            "imageUrl": "https://cdn.example.com/edited-images/ad.jpg",
            "s3Key": "edited-images/ad.jpg",
            "textPlacement": "none",
            "trick": {"id": "micro-moment", "name": "The 3-Second Story"},
            "reasoning": "r",
        }
        options = gen.call_args.args[0]
        assert options.approach == "bernbach"
        assert options.settings.caa_model == "test/model"

    def test_missing_brief_name_is_400(self, client):
        body = {**self.BODY, "briefName": ""}
        resp = client.post("/api/generate-ad", json=body)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "briefName and approach are required"

    def test_missing_approach_is_400(self, client):
        body = {k: v for k, v in self.BODY.items() if k != "approach"}
        resp = client.post("/api/generate-ad", json=body)
        assert resp.status_code == 400

    def test_failure_is_500(self, client):
        with patch(
            "briefboarder.api.routes_caa.generate_ad",
            new=AsyncMock(side_effect=RuntimeError("Failed to generate image: boom")),
        ):
            resp = client.post("/api/generate-ad", json=self.BODY)
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to generate image: boom"


class TestEnhanceBrief:
    def test_name_is_kept_and_description_enhanced(self, client):
        with patch(
            "briefboarder.api.routes_caa.enhance_brief", return_value="A sharper brief."
        ) as enhance:
            resp = client.post(
                "/api/enhance-brief",
                json={"briefName": "Summer Launch", "briefDescription": "water"},
            )

        assert resp.status_code == 200
        assert resp.json() == {
            "enhancedName": "Summer Launch",
            "enhancedDescription": "A sharper brief.",
        }
        enhance.assert_called_once_with(brief_name="Summer Launch", brief_description="water")

    def test_requires_name_or_description(self, client):
        resp = client.post("/api/enhance-brief", json={})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Brief name or description is required"

    def test_llm_failure_is_500(self, client):
        with patch(
            "briefboarder.api.routes_caa.enhance_brief", side_effect=RuntimeError("provider down")
        ):
            resp = client.post("/api/enhance-brief", json={"briefDescription": "water"})
        assert resp.status_code == 500


class TestDescribeImage:
    def test_url_is_downscaled_before_describing(self, client, cdn):
        with patch(
            "briefboarder.api.routes_caa.describe_image", return_value="A runner at dawn."
        ) as describe:
            resp = client.post("/api/describe-image", json={"imageUrl": f"{cdn}/briefs/a.png"})

        assert resp.status_code == 200
        assert resp.json() == {"description": "A runner at dawn."}
        describe.assert_called_once_with(
            image_url=f"{cdn}/cdn-cgi/image/width=1024,height=1024,fit=scale-down/briefs/a.png"
        )

    def test_missing_url_is_400(self, client):
        resp = client.post("/api/describe-image", json={})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Image URL is required"


def test_preset_assets(client, cdn):
    resp = client.get("/api/assets")
    assert resp.status_code == 200
    assert resp.json() == [
        {"name": "logo", "label": "Logo", "url": f"{cdn}/logo.png", "type": "preset"}
    ]
