import textwrap

import matplotlib
import pytest

matplotlib.use('Agg')

SIMPLE_BVH = '''\
HIERARCHY
ROOT Hips
{
\tOFFSET 0.0 0.0 0.0
\tCHANNELS 6 Xposition Yposition Zposition Zrotation Xrotation Yrotation
\tJOINT Spine
\t{
\t\tOFFSET 0.0 10.0 0.0
\t\tCHANNELS 3 Zrotation Xrotation Yrotation
\t\tEnd Site
\t\t{
\t\t\tOFFSET 0.0 5.0 0.0
\t\t}
\t}
\tJOINT LeftLeg
\t{
\t\tOFFSET 3.0 -10.0 0.0
\t\tCHANNELS 3 Zrotation Xrotation Yrotation
\t\tEnd Site
\t\t{
\t\t\tOFFSET 0.0 -8.0 0.0
\t\t}
\t}
}
MOTION
Frames: 2
Frame Time: 0.0333333
0 0 0 0 0 0 0 0 0 0 0 0
1 91 2 90 0 0 10 0 0
20 30 40
'''


@pytest.fixture
def write_bvh(tmp_path):
    '''Returns a function writing BVH text to a temporary file and returning its path'''
    counter = [0]

    def _write(text, dedent=True):
        counter[0] += 1
        path = tmp_path / ('motion_%d.bvh' % counter[0])
        path.write_text(textwrap.dedent(text) if dedent else text)
        return path

    return _write


@pytest.fixture
def simple_bvh(write_bvh):
    return write_bvh(SIMPLE_BVH, dedent=False)
