"""
Tests for the command line interface.
"""

import json

import pytest

from linkedjson import cli

DOC = {
    '@context': {'name': 'http://schema.org/name'},
    '@id': 'http://example.org/jane',
    'name': 'Jane',
}


@pytest.fixture
def doc_path(tmp_path):
    path = tmp_path / 'doc.jsonld'
    path.write_text(json.dumps(DOC), encoding='utf-8')
    return str(path)


def _run(capsys, argv):
    assert cli.main(argv) == 0
    return capsys.readouterr().out


class TestCli:
    def test_expand_is_default(self, capsys, doc_path):
        output = json.loads(_run(capsys, [doc_path]))
        assert output == [{
            '@id': 'http://example.org/jane',
            'http://schema.org/name': [{'@value': 'Jane'}],
        }]

    def test_expand(self, capsys, doc_path):
        output = json.loads(_run(capsys, [doc_path, '--expand']))
        assert output[0]['@id'] == 'http://example.org/jane'

    def test_compact_with_inline_context(self, capsys, doc_path):
        ctx = '{"n": "http://schema.org/name"}'
        output = json.loads(_run(capsys, [doc_path, '--compact', ctx]))
        assert output == {
            '@context': {'n': 'http://schema.org/name'},
            '@id': 'http://example.org/jane',
            'n': 'Jane',
        }

    def test_compact_with_context_file(self, capsys, doc_path, tmp_path):
        ctx_path = tmp_path / 'ctx.jsonld'
        ctx_path.write_text(
            '{"@context": {"n": "http://schema.org/name"}}', encoding='utf-8')
        output = json.loads(
            _run(capsys, [doc_path, '--compact', str(ctx_path)]))
        assert output['n'] == 'Jane'

    def test_flatten(self, capsys, doc_path):
        output = json.loads(_run(capsys, [doc_path, '--flatten']))
        assert output == [{
            '@id': 'http://example.org/jane',
            'http://schema.org/name': [{'@value': 'Jane'}],
        }]

    def test_frame(self, capsys, doc_path):
        frame = '{"@id": "http://example.org/jane"}'
        output = json.loads(_run(capsys, [doc_path, '--frame', frame]))
        assert output == {
            '@id': 'http://example.org/jane',
            'http://schema.org/name': 'Jane',
        }

    def test_to_rdf(self, capsys, doc_path):
        output = _run(capsys, [doc_path, '--to-rdf'])
        assert output == (
            '<http://example.org/jane> <http://schema.org/name> "Jane" .\n')

    def test_from_rdf(self, capsys, tmp_path):
        path = tmp_path / 'data.nq'
        path.write_text(
            '<http://example.org/s> <http://example.org/p> '
            '"5"^^<http://www.w3.org/2001/XMLSchema#integer> .\n',
            encoding='utf-8')
        output = json.loads(
            _run(capsys, [str(path), '--from-rdf', '--native-types']))
        assert output == [{
            '@id': 'http://example.org/s',
            'http://example.org/p': [{'@value': 5}],
        }]

    def test_indent(self, capsys, doc_path):
        output = _run(capsys, [doc_path, '--indent', '4'])
        assert output.startswith('[\n    {')

    def test_processing_error_exits_with_1(self, capsys, tmp_path):
        path = tmp_path / 'bad.jsonld'
        path.write_text('{"@context": 42}', encoding='utf-8')
        assert cli.main([str(path), '--quiet']) == 1
        assert capsys.readouterr().out == ''

    def test_conflicting_actions(self, capsys, doc_path):
        with pytest.raises(SystemExit):
            cli.main([doc_path, '--expand', '--to-rdf'])
