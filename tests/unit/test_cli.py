import yaml

from inspection_lib.cli import main


def _config(tmp_path):
    path = tmp_path / 'server_config.yml'
    path.write_text('log_level: WARNING\nstorage_backend: memory\n')
    return str(path)


def test_wiring_lists_registrations(tmp_path, capsys):
    assert main(['--config', _config(tmp_path), 'wiring']) == 0
    out = capsys.readouterr().out
    assert 'BillService: registered' in out
    assert 'StorageBackend: registered' in out


def test_stats_prints_yaml(tmp_path, capsys):
    assert main(['--config', _config(tmp_path), 'stats']) == 0
    stats = yaml.safe_load(capsys.readouterr().out)
    assert stats['bills']['total'] == 0


def test_seed_then_stats_on_file_storage(tmp_path, capsys):
    cfg = str(tmp_path / 'cfg.yml')
    data_dir = str(tmp_path / 'data')
    assert main(['--config', cfg, '--data-dir', data_dir, '--backend', 'file', 'seed']) == 0
    assert 'created' in capsys.readouterr().out

    assert main(['--config', cfg, '--data-dir', data_dir, '--backend', 'file', 'seed']) == 0
    assert 'already present' in capsys.readouterr().out

    assert main(['--config', cfg, '--data-dir', data_dir, '--backend', 'file', 'stats']) == 0
    assert yaml.safe_load(capsys.readouterr().out)['bills']['total'] == 1


def test_bad_config_exits_with_error(tmp_path, capsys):
    path = tmp_path / 'server_config.yml'
    path.write_text('- not\n- a mapping\n')
    assert main(['--config', str(path), 'wiring']) == 1
    assert 'Failed to load config' in capsys.readouterr().err
