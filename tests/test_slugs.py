from directory_api.slugs import entity_slug, generate_slug, slugify


#slugify
def test_slugify_collapses_punctuation_and_case():
    assert slugify("  Delta Institute, Pune ") == "delta-institute-pune"
    assert slugify("B.Tech (CSE) -- 2025") == "b-tech-cse-2025"


def test_slugify_handles_missing_and_numbers():
    assert slugify(None) == ""
    assert slugify("") == ""
    assert slugify("---") == ""
    assert slugify(42) == "42"


#college slugs
def test_generate_slug_name_and_city():
    assert generate_slug({"name": "Delta Institute", "city": "Pune"}) == "delta-institute-pune"


def test_generate_slug_does_not_repeat_city_already_in_name():
    assert generate_slug({"name": "IIT Delhi", "city": "Delhi"}) == "iit-delhi"
    assert generate_slug({"name": "Pune", "city": "Pune"}) == "pune"


def test_generate_slug_falls_back_to_state():
    attrs = {"name": "Delta Institute", "state": "Maharashtra"}
    assert generate_slug(attrs) == "delta-institute-maharashtra"


def test_generate_slug_city_wins_over_state():
    attrs = {"name": "Delta Institute", "city": "Pune", "state": "Maharashtra"}
    assert generate_slug(attrs) == "delta-institute-pune"


def test_generate_slug_alternate_name_fields():
    assert generate_slug({"collegeName": "Omega College"}) == "omega-college"
    assert generate_slug({"universityName": "Sigma University", "city": "Nagpur"}) == "sigma-university-nagpur"


def test_generate_slug_ignores_structured_values():
    attrs = {"name": "Kappa College", "city": {"label": "Goa"}, "state": "Goa"}
    assert generate_slug(attrs) == "kappa-college-goa"


def test_generate_slug_without_name_uses_id():
    assert generate_slug({"id": "AbC123", "city": "Pune"}) == "abc123"
    assert generate_slug({}) == ""


def test_generate_slug_is_deterministic():
    attrs = {"name": "Delta Institute", "city": "Pune"}
    assert generate_slug(attrs) == generate_slug(dict(attrs))


#other kinds
def test_entity_slug_prefers_stored_slug():
    assert entity_slug("exam", {"slug": " jee-main-2025 ", "name": "JEE Main"}) == "jee-main-2025"
    assert entity_slug("college", {"slug": "", "name": "Delta Institute"}) == "delta-institute"


def test_entity_slug_per_kind():
    assert entity_slug("exam", {"examName": "JEE Main"}) == "jee-main"
    assert entity_slug("course", {"courseName": "MBA", "name": "Ignored"}) == "mba"
    assert entity_slug("scholarship", {"title": "Merit Award"}) == "merit-award"
    assert entity_slug("article", {"heading": "How To Apply"}) == "how-to-apply"


def test_entity_slug_postings_include_company():
    assert entity_slug("job", {"title": "Data Analyst", "company": "Acme"}) == "data-analyst-acme"
    assert entity_slug("job", {"position": "Clerk"}) == "clerk"
    assert entity_slug("job", {"company": "Acme"}) == "acme-job"
    assert entity_slug("internship", {"company": "Acme"}) == "acme-internship"


def test_entity_slug_falls_back_to_id():
    assert entity_slug("news", {"id": "N1"}) == "n1"
    assert entity_slug("news", {}) == ""
