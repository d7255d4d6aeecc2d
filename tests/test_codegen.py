"""Tests for rendering and the command line entry point."""

from stubgen.__main__ import main
from stubgen.codegen import generate, make_environment, render


class TestRender:
    """Test the reference templates against the sample context."""

    def test_models_rs(self, ctx):
        text = render(ctx)["models.rs"]
        assert "pub struct ContainerSummary {" in text
        assert "pub struct ModelType {" in text
        assert "pub _type: Option<String>," in text
        assert "pub type ContainerIDs = Vec<String>;" in text
        assert "pub enum RESTART_POLICY_NAME {" in text
        assert '    #[serde(rename = "unless-stopped")]\n    UNLESS_STOPPED,' in text
        assert "    #[serde(with=date_serializer)]\n    pub created: Date<Utc>," in text
        assert "    #[serde(flatten)]\n    pub parent: ServiceSpec," in text

    def test_multi_line_example_indented(self, ctx):
        text = render(ctx)["models.rs"]
        assert '    /// Example:\n    /// {\n    ///   "com.example.vendor": "Acme",' in text

    def test_paths_rs(self, ctx):
        text = render(ctx)["paths.rs"]
        assert "pub mod container {" in text
        assert 'pub const CONTAINER_LIST: &str = "/containers/json";' in text
        assert "pub mod default {" in text
        assert "/// * `shared_size` (query): bool" in text

    def test_quotes_removed_from_literals(self):
        template = make_environment().from_string('rename = "{{ name | unquote }}"')
        assert template.render(name='say "hi"') == 'rename = "say hi"'


class TestGenerate:
    """Test writing rendered files."""

    def test_writes_files(self, ctx, tmp_path, capsys):
        written = generate(ctx, tmp_path)
        assert sorted(p.name for p in written) == ["models.rs", "paths.rs"]
        assert (tmp_path / "src" / "models.rs").read_text().startswith("// Generated by stubgen")
        assert "18 models, 12 operations" in capsys.readouterr().out


class TestMain:
    """Test the command line entry point."""

    def test_default_spec(self, tmp_path):
        assert main(["-o", str(tmp_path)]) == 0
        assert (tmp_path / "src" / "paths.rs").exists()

    def test_bad_config(self, tmp_path):
        config = tmp_path / "stubgen.yaml"
        config.write_text("not_a_setting: 1\n")
        assert main(["-c", str(config), "-o", str(tmp_path)]) == 1

    def test_missing_spec(self, tmp_path):
        assert main([str(tmp_path / "missing.yaml"), "-o", str(tmp_path)]) == 1
