import json

from listingmatch.cli import main


def _write(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding='utf-8')
    return str(path)


def test_cli_prints_evaluation(tmp_path, capsys, raw_payload):
    code = main([_write(tmp_path, 'in.json', raw_payload), '--reference-year', '2024'])
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert [m['listingName'] for m in out['matches']] == ['Same', 'Far']
    assert out['pricing']['count'] == 2


def test_cli_rank_and_export(tmp_path, capsys, raw_payload):
    raw_payload['comparables'].reverse()
    code = main([_write(tmp_path, 'in.json', raw_payload), '--rank', '--export', str(tmp_path / 'out')])
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert [m['listingName'] for m in out['matches']] == ['Same', 'Far']
    assert out['exportPath'].endswith('.csv')


def test_cli_tuning_file(tmp_path, capsys, raw_payload):
    tuning = _write(tmp_path, 'tuning.json', {'key_weights': {'bedrooms': 0, 'property_type': 1}})
    assert main([_write(tmp_path, 'in.json', raw_payload), '--config', tuning]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out['matches'][1]['primaryScore'] == 0.0


def test_cli_invalid_comparable(tmp_path, capsys, raw_payload):
    raw_payload['comparables'][0]['size'] = 'huge'
    assert main([_write(tmp_path, 'in.json', raw_payload)]) == 2
    assert 'size' in capsys.readouterr().err


def test_cli_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / 'nope.json')]) == 2
    assert 'error' in capsys.readouterr().err
