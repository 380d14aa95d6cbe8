'''
-*- coding: utf-8 -*-
time: 2023/4/15 13:05
file: parsers.py
author: Endy_Liu_Noonell
'''

import logging
import re

import numpy as np

from . import transforms as tr
from .channels import map_channel, joint_name
from .data import Body, Joint, KinematicTree, MotionData
from .errors import GrammarError, ExhaustionError, ShapeMismatchError
from .geometry import add_geometry, create_frame_shape, create_end_site_shape

logger = logging.getLogger(__name__)

MAX_TOKEN_LENGTH = 64
MAX_DEPTH = 256

# Tokens that end the HIERARCHY section without being consumed
TERMINALS = ('MOTION', 'FRAMES:', 'FRAME')

# Name of the extra body reorienting a Y-up skeleton to Z-up, X-forward
ZUP_ROOT_NAME = 'BVHROOT'


class BVHScanner():
    '''
    A wrapper class for re.Scanner, feeding whitespace separated tokens
    from a text stream one line at a time.

    The cursor only moves forward, except through mark() / restore() and
    a single unread() of the token just returned
    '''

    def __init__(self, stream, max_token_length=MAX_TOKEN_LENGTH):
        def word(scanner, token):
            return token

        self.scanner = re.Scanner([
            (r'\S+', word),
            (r'\s+', None)
        ])
        self.stream = stream
        self.max_token_length = max_token_length
        self.line_no = 0
        self._line_start = stream.tell()
        self._tokens = []
        self._pos = 0

    def _read_line(self):
        try:
            start = self.stream.tell()
            line = self.stream.readline()
        except UnicodeDecodeError as e:
            raise GrammarError('Undecodable text: %s' % e.reason, self.line_no + 1) from None
        if not line:
            return False
        self._line_start = start
        self.line_no += 1
        self._tokens, remainder = self.scanner.scan(line)
        self._pos = 0
        return True

    def next_token(self):
        '''Returns the next token, or None at the end of the stream'''
        while self._pos >= len(self._tokens):
            if not self._read_line():
                return None
        token = self._tokens[self._pos]
        self._pos += 1
        if len(token) > self.max_token_length:
            raise GrammarError('Token "%s..." is longer than %d characters'
                               % (token[:16], self.max_token_length), self.line_no)
        return token

    def unread(self):
        if self._pos == 0:
            raise RuntimeError('Nothing to unread')
        self._pos -= 1

    def mark(self):
        return self._line_start, self.line_no, self._pos

    def restore(self, mark):
        line_start, line_no, pos = mark
        self.stream.seek(line_start)
        if line_no == 0:
            self.line_no = 0
            self._tokens = []
            self._pos = 0
            return
        self.line_no = line_no - 1
        self._read_line()
        self._pos = pos

    def scan_until_keyword(self, keyword):
        '''Skips tokens up to and including keyword (any case). False if never found'''
        keyword = keyword.lower()
        while True:
            token = self.next_token()
            if token is None:
                return False
            logger.debug('Reading keyword "%s"', token)
            if token.lower() == keyword:
                return True

    def _require_token(self, what):
        token = self.next_token()
        if token is None:
            raise ExhaustionError('Reached end of file while expecting %s' % what, self.line_no)
        return token

    def expect(self, keyword):
        token = self._require_token('"%s"' % keyword)
        if token.lower() != keyword.lower():
            raise GrammarError('Expected "%s", got "%s"' % (keyword, token), self.line_no)
        return token

    def next_name(self):
        return self._require_token('a name')

    def next_float(self):
        token = self._require_token('a number')
        try:
            return float(token)
        except ValueError:
            raise GrammarError('Expected a number, got "%s"' % token, self.line_no) from None

    def next_int(self):
        token = self._require_token('an integer')
        try:
            return int(token)
        except ValueError:
            raise GrammarError('Expected an integer, got "%s"' % token, self.line_no) from None

    def count_numbers(self):
        '''Consumes the numeric tokens up to the end of the stream. Any other token is an error'''
        count = 0
        while True:
            token = self.next_token()
            if token is None:
                return count
            try:
                float(token)
            except ValueError:
                raise GrammarError('Expected a number, got "%s"' % token, self.line_no) from None
            count += 1

    def read_numbers(self, count):
        for i in range(count):
            yield self.next_float()


class BVHParser():
    '''
    A class to parse the HIERARCHY section of a BVH file.

    Builds a KinematicTree with one body per ROOT / JOINT and one joint per
    channel. An OFFSET becomes the origin of the first joint of the next
    CHANNELS block; it is dropped by any CHANNELS block, End Site or closing
    brace that follows it
    '''

    def __init__(self, linear_scale=1.0, z_up_x_forward=False, max_depth=MAX_DEPTH,
                 decorate=True, rng=None, max_token_length=MAX_TOKEN_LENGTH):
        self.linear_scale = linear_scale
        self.z_up_x_forward = z_up_x_forward
        self.max_depth = max_depth
        self.decorate = decorate
        self.rng = rng
        self.max_token_length = max_token_length
        self.reset()

    def reset(self):
        self.tree = None
        self.scanner = None
        self.bone_context = []
        self.offset = np.zeros(3)

    def parse(self, filename):
        with open(filename, 'r', encoding='utf-8') as bvh_file:
            scanner = BVHScanner(bvh_file, self.max_token_length)
            return self.parse_tokens(scanner, file_name=str(filename))

    def parse_tokens(self, scanner, file_name=None):
        '''Parses from an open scanner, leaving it on the first token after the hierarchy'''
        self.reset()
        self.scanner = scanner
        self.tree = KinematicTree(file_name)

        # First entry must be "HIERARCHY", second "ROOT"
        self.scanner.expect('HIERARCHY')
        self.scanner.expect('ROOT')

        top = self._new_top_level_body()
        self._parse_hierarchy(top)

        self.tree.set_state()
        if self.decorate:
            add_geometry(self.tree, self.rng)

        logger.debug('Parsed %d bodies and %d joints', len(self.tree), self.tree.dof)
        return self.tree

    def _new_top_level_body(self):
        if not self.z_up_x_forward:
            return None
        xyz_root = Body(ZUP_ROOT_NAME)
        xyz_root.A_BP = tr.rotation(tr.euler_rotation(0.5 * np.pi, 0.5 * np.pi, 0.0))
        if self.decorate:
            xyz_root.add_shape(create_frame_shape(1.0))
        return self.tree.insert_body(None, xyz_root)

    def _push_bone_context(self, body):
        if len(self.bone_context) > self.max_depth:
            raise GrammarError('Skeleton nesting deeper than %d' % self.max_depth, self.scanner.line_no)
        self.bone_context.append(body)

    def _get_bone_context(self):
        return self.bone_context[len(self.bone_context) - 1]

    def _pop_bone_context(self):
        self.bone_context = self.bone_context[:-1]

    def _new_bone(self, parent, frame_scale):
        name = self.scanner.next_name()
        if name in self.tree:
            raise GrammarError('Duplicate body name "%s"' % name, self.scanner.line_no)
        bone = Body(name)
        if self.decorate:
            bone.add_shape(create_frame_shape(frame_scale))
        self.tree.insert_body(parent, bone)
        self.scanner.expect('{')
        self._push_bone_context(bone)
        return bone

    def _read_offset(self):
        offsets = np.array([self.scanner.next_float() for i in range(3)])
        return offsets * self.linear_scale

    def _read_channels(self, body):
        channel_count = self.scanner.next_int()
        if channel_count < 0:
            raise GrammarError('Negative channel count %d' % channel_count, self.scanner.line_no)
        logger.debug('Found %d channels', channel_count)

        for i in range(channel_count):
            label = self.scanner.next_name()
            spec = map_channel(label, self.scanner.line_no)

            A_JP = None
            if i == 0 and np.dot(self.offset, self.offset) > 0.0:
                A_JP = tr.translation(self.offset)

            joint = Joint(joint_name(body.name, label), spec.joint_type, spec.dir_idx,
                          spec.q_min, spec.q_max, A_JP)
            self.tree.insert_joint(body, joint)

    def _read_end_site(self, body):
        self.scanner.expect('Site')
        self.scanner.expect('{')
        self.scanner.expect('OFFSET')
        end_offset = self._read_offset()
        self.scanner.expect('}')
        if self.decorate:
            body.add_shape(create_end_site_shape(end_offset))

    def _parse_hierarchy(self, top):
        '''
        Runs the grammar from the ROOT keyword until the root's closing brace
        or a MOTION / Frames: / Frame token
        '''
        self.bone_context = [top]
        self.offset = np.zeros(3)
        token = 'ROOT'

        while True:
            if token is None:
                raise ExhaustionError('Reached end of file inside HIERARCHY', self.scanner.line_no)

            keyword = token.upper()
            logger.debug('Next keyword %s', token)

            if keyword == 'ROOT':
                self._new_bone(top, 0.5)
                self.offset = np.zeros(3)
            elif keyword == 'OFFSET':
                self.offset = self._read_offset()
            elif keyword == 'CHANNELS':
                self._read_channels(self._get_bone_context())
                self.offset = np.zeros(3)
            elif keyword == 'JOINT':
                self._new_bone(self._get_bone_context(), 0.1)
                self.offset = np.zeros(3)
            elif keyword == 'END':
                self._read_end_site(self._get_bone_context())
                self.offset = np.zeros(3)
            elif token == '}':
                self._pop_bone_context()
                self.offset = np.zeros(3)
                if len(self.bone_context) == 1:
                    return
            elif keyword in TERMINALS:
                if len(self.bone_context) > 1:
                    logger.warning('Found %s with %d unclosed braces', token, len(self.bone_context) - 1)
                self.scanner.unread()
                return
            else:
                logger.warning('Skipping unknown keyword "%s" in line %d', token, self.scanner.line_no)

            token = self.scanner.next_token()


class TrajectoryParser():
    '''
    A class to parse the MOTION section of a BVH file into a
    frames x channels matrix in SI units
    '''

    def __init__(self, linear_scale=1.0, angular_scale=1.0, max_token_length=MAX_TOKEN_LENGTH):
        self.linear_scale = linear_scale
        self.angular_scale = angular_scale
        self.max_token_length = max_token_length
        self.reset()

    def reset(self):
        self.scanner = None
        self.values = None
        self.frame_time = 0.0
        self.n_frames = 0

    def parse(self, tree, filename):
        with open(filename, 'r', encoding='utf-8') as bvh_file:
            scanner = BVHScanner(bvh_file, self.max_token_length)
            return self.parse_tokens(tree, scanner)

    def parse_tokens(self, tree, scanner):
        self.reset()
        self.scanner = scanner
        self._parse_motion(tree)
        self._apply_scale(tree)
        return self.values, self.frame_time

    def _parse_motion(self, tree):
        if not self.scanner.scan_until_keyword('MOTION'):
            raise GrammarError("Couldn't find MOTION keyword")

        self.scanner.expect('Frames:')
        frame_count = self.scanner.next_int()
        if frame_count < 0:
            raise GrammarError('Negative frame count %d' % frame_count, self.scanner.line_no)
        logger.debug('Trajectory has %d frames', frame_count)

        self.scanner.expect('Frame')
        self.scanner.expect('Time:')
        self.frame_time = self.scanner.next_float()
        logger.debug('Trajectory has frame time %f', self.frame_time)

        start = self.scanner.mark()
        value_count = self.scanner.count_numbers()
        logger.debug('Found %d values', value_count)

        if frame_count == 0 and value_count == 0:
            channel_count = tree.dof
        elif frame_count == 0 or value_count % frame_count != 0:
            raise ShapeMismatchError('%d values do not divide into %d frames' % (value_count, frame_count))
        else:
            channel_count = value_count // frame_count

        if channel_count != tree.dof:
            raise ShapeMismatchError('Trajectory has %d channels but the skeleton has %d degrees of freedom'
                                     % (channel_count, tree.dof))

        self.scanner.restore(start)
        logger.debug('Creating %d x %d array', frame_count, channel_count)
        values = np.fromiter(self.scanner.read_numbers(value_count), dtype=float, count=value_count)
        self.values = values.reshape(frame_count, channel_count)
        self.n_frames = frame_count

    def _apply_scale(self, tree):
        scale = np.empty(tree.dof)
        for joint in tree.traverse_joints():
            scale[joint.index] = self.angular_scale if joint.is_rotation else self.linear_scale
        self.values *= scale


def parse_hierarchy(filename, linear_scale=1.0, z_up_x_forward=False, decorate=True, rng=None):
    '''Returns the KinematicTree described by the HIERARCHY section of a BVH file'''
    parser = BVHParser(linear_scale=linear_scale, z_up_x_forward=z_up_x_forward,
                       decorate=decorate, rng=rng)
    return parser.parse(filename)


def parse_trajectory(tree, filename, linear_scale=1.0, angular_scale=1.0):
    '''
    Returns (values, frame_time) from the MOTION section of a BVH file.
    tree is the skeleton parsed from the same file and fixes the channel count
    '''
    parser = TrajectoryParser(linear_scale=linear_scale, angular_scale=angular_scale)
    return parser.parse(tree, filename)


def load_bvh(filename, linear_scale=1.0, angular_scale=1.0, z_up_x_forward=False, decorate=True, rng=None):
    '''Reads skeleton and motion of a BVH file in a single pass over one file handle'''
    with open(filename, 'r', encoding='utf-8') as bvh_file:
        scanner = BVHScanner(bvh_file)
        tree = BVHParser(linear_scale=linear_scale, z_up_x_forward=z_up_x_forward,
                         decorate=decorate, rng=rng).parse_tokens(scanner, file_name=str(filename))
        values, frame_time = TrajectoryParser(linear_scale=linear_scale,
                                              angular_scale=angular_scale).parse_tokens(tree, scanner)
    return MotionData(tree=tree, values=values, frame_time=frame_time, file_name=str(filename))
