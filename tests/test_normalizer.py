from animgraph.ir.normalizer import normalize_keys, normalize_token


MIXED_CASE = """{
  "Transitions": [
    {"StartState": {"Type": "Animation", "AnimationName": "RunFast"},
     "EndState": {"TYPE" : "BlendTree", "animationName": "Locomotion"},
     "Conditions": [{"Name": "IsRunning", "BoolValue": true}]}
  ]
}"""


def test_keys_are_lowercased():
    normalized = normalize_keys(MIXED_CASE)
    assert '"transitions":' in normalized
    assert '"startstate":' in normalized
    assert '"type" :' in normalized
    assert '"animationname": "RunFast"' in normalized
    assert '"boolvalue": true' in normalized


def test_values_are_left_untouched():
    normalized = normalize_keys(MIXED_CASE)
    assert '"Animation"' in normalized
    assert '"BlendTree"' in normalized
    assert '"IsRunning"' in normalized


def test_normalization_is_idempotent():
    samples = [
        MIXED_CASE,
        '{"A": {"B": ["C", "D"]}}',
        "not json at all {",
        "",
        '{"Name": "Key:"}',
    ]
    for text in samples:
        once = normalize_keys(text)
        assert normalize_keys(once) == once


def test_malformed_text_passes_through():
    assert normalize_keys("{{ broken") == "{{ broken"


def test_normalize_token():
    assert normalize_token("  BlendTree ") == "blendtree"
    assert normalize_token("TwoD") == "twod"
    assert normalize_token(None) == ""
