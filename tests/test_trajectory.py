import numpy as np
import pytest

from bvhkin.errors import GrammarError, ShapeMismatchError
from bvhkin.parsers import parse_hierarchy, parse_trajectory, load_bvh, TrajectoryParser

HEADER = '''\
HIERARCHY
ROOT A
{
    CHANNELS 3 Xposition Yposition Zrotation
    End Site
    {
        OFFSET 0 1 0
    }
}
'''


def test_matrix_shape_and_frame_time(simple_bvh):
    tree = parse_hierarchy(simple_bvh)
    values, frame_time = parse_trajectory(tree, simple_bvh)

    assert values.shape == (2, tree.dof)
    assert frame_time == pytest.approx(0.0333333)
    np.testing.assert_allclose(values[0], np.zeros(12))
    np.testing.assert_allclose(values[1], [1, 91, 2, 90, 0, 0, 10, 0, 0, 20, 30, 40])


def test_unit_scaling_by_motion_type(simple_bvh):
    tree = parse_hierarchy(simple_bvh)
    values, _ = parse_trajectory(tree, simple_bvh, linear_scale=0.01, angular_scale=np.pi / 180.0)

    np.testing.assert_allclose(values[1, :3], [0.01, 0.91, 0.02])
    np.testing.assert_allclose(values[1, 3], np.pi / 2)
    np.testing.assert_allclose(values[1, 9:], np.radians([20, 30, 40]))


def test_frame_count_must_divide_values(write_bvh):
    path = write_bvh(HEADER + 'MOTION\nFrames: 3\nFrame Time: 0.1\n' + '1 ' * 10 + '\n', dedent=False)
    tree = parse_hierarchy(path)
    with pytest.raises(ShapeMismatchError):
        parse_trajectory(tree, path)


def test_channels_must_match_dof(write_bvh):
    path = write_bvh(HEADER + 'MOTION\nFrames: 2\nFrame Time: 0.1\n1 2 3 4\n5 6 7 8\n', dedent=False)
    tree = parse_hierarchy(path)
    with pytest.raises(ShapeMismatchError, match='3 degrees of freedom'):
        parse_trajectory(tree, path)


def test_missing_motion_section(write_bvh):
    path = write_bvh(HEADER, dedent=False)
    tree = parse_hierarchy(path)
    with pytest.raises(GrammarError, match='MOTION'):
        parse_trajectory(tree, path)


def test_malformed_motion_header(write_bvh):
    path = write_bvh(HEADER + 'MOTION\nFrames: 1\nFrameTime: 0.1\n1 2 3\n', dedent=False)
    tree = parse_hierarchy(path)
    with pytest.raises(GrammarError, match='Frame'):
        parse_trajectory(tree, path)


def test_values_may_wrap_lines(write_bvh):
    path = write_bvh(HEADER + 'MOTION\nFrames: 2\nFrame Time: 0.5\n1\n2 3 4\n\n5 6\n\n', dedent=False)
    tree = parse_hierarchy(path)
    values, frame_time = parse_trajectory(tree, path, angular_scale=2.0)

    assert frame_time == 0.5
    np.testing.assert_allclose(values, [[1, 2, 6], [4, 5, 12]])


def test_zero_frames(write_bvh):
    path = write_bvh(HEADER + 'MOTION\nFrames: 0\nFrame Time: 0.1\n', dedent=False)
    tree = parse_hierarchy(path)
    values, _ = parse_trajectory(tree, path)
    assert values.shape == (0, 3)


def test_parser_keeps_last_result(simple_bvh):
    tree = parse_hierarchy(simple_bvh)
    parser = TrajectoryParser(angular_scale=0.5)
    values, frame_time = parser.parse(tree, simple_bvh)
    assert parser.n_frames == 2
    assert parser.values is values
    assert parser.frame_time == frame_time


def test_load_bvh(simple_bvh):
    motion = load_bvh(simple_bvh, linear_scale=0.01, angular_scale=np.pi / 180.0)

    assert motion.tree.dof == 12
    assert motion.n_frames == 2
    assert motion.framerate == pytest.approx(30.0, rel=1e-5)
    np.testing.assert_allclose(motion.values[1, 3], np.pi / 2)

    df = motion.to_dataframe()
    assert list(df.columns) == motion.channel_names
    assert df.columns[0] == 'Hips_jnt_Xposition'
    assert df.shape == (2, 12)
    assert df.index[1] == pytest.approx(0.0333333)


def test_text_inside_values_fails(write_bvh):
    path = write_bvh(HEADER + 'MOTION\nFrames: 1\nFrame Time: 0.1\n1 2 3 oops 4 5 6\n', dedent=False)
    tree = parse_hierarchy(path)
    with pytest.raises(GrammarError, match='oops'):
        parse_trajectory(tree, path)


def test_text_after_values_fails(write_bvh):
    path = write_bvh(HEADER + 'MOTION\nFrames: 1\nFrame Time: 0.1\n1 2 3\nEND\n', dedent=False)
    tree = parse_hierarchy(path)
    with pytest.raises(GrammarError) as excinfo:
        parse_trajectory(tree, path)
    assert excinfo.value.line == 14
