""" RAI - Right-Associative Integer expression interpreter """
import argparse
import sys
from enum import Enum

# space is the only token delimiter of the language
DELIMITER = ' '
DIGITS = '0123456789'

# integer width: signed 64-bit
INT_MIN = -2 ** 63
INT_MAX = 2 ** 63 - 1

_SHOULD_LOG_TOKENS = False
_SHOULD_LOG_STACK = False


class ErrorCode(Enum):
    EMPTY_INPUT = 'Empty input'
    MALFORMED_TOKEN = 'Malformed token'
    UNEXPECTED_TOKEN = 'Unexpected token'
    TRAILING_OPERATOR = 'Trailing operator'
    OVERFLOW = 'Integer overflow'
    TOO_DEEP = 'Expression too deep'


class Error(Exception):
    def __init__(self, error_code=None, token=None, message=None):
        self.error_code = error_code
        self.token = token
        self.message = f'{self.__class__.__name__}: {message}'
        super().__init__(self.message)


class LexerError(Error):
    def __init__(self, error_code=None, piece=None, position=None, message=None):
        super().__init__(error_code=error_code, message=message)
        self.piece = piece
        # 1-based column of the piece in the source line
        self.position = position


class ParserError(Error):
    def __init__(self, error_code=None, token=None, expected=None, message=None):
        super().__init__(error_code=error_code, token=token, message=message)
        self.index = token.index if token is not None else None
        self.expected = expected


class EvaluationError(Error):
    pass


###############################################################################
#                                                                             #
#  LEXER                                                                      #
#                                                                             #
###############################################################################

# Token types
#
class TokenType(Enum):
    # block of operators
    PLUS = '+'
    MINUS = '-'
    # misc
    NUMBER = 'NUMBER'
    EOF = 'EOF'


def _build_operators():
    tt_list = list(TokenType)
    start_index = tt_list.index(TokenType.PLUS)
    end_index = tt_list.index(TokenType.MINUS)
    return tuple(tt_list[start_index:end_index + 1])


OPERATORS = _build_operators()


class Token(object):
    def __init__(self, type, value, index=None, column=None):
        self.type = type
        self.value = value
        # position in the token sequence and 1-based column in the source
        self.index = index
        self.column = column

    @property
    def is_operator(self):
        return self.type in OPERATORS

    def __str__(self):
        """String representation of the class instance.

        Examples:
            Token(NUMBER, 3, index=0, column=1)
            Token(PLUS, '+', index=1, column=3)
        """
        return 'Token({type}, {value}, index={index}, column={column})'.format(
            type=self.type.name,
            value=repr(self.value),
            index=self.index,
            column=self.column,
        )

    def __repr__(self):
        return self.__str__()


class Lexer(object):
    def __init__(self, text):
        # client string input, e.g. "2 - 3 + 1"
        self.text = text
        # self.pos is an index into self.text
        self.pos = 0
        self.current_char = self.text[self.pos] if self.text else None
        self.column = 1
        # index of the next token to be produced
        self.index = 0

    OPERATOR_SYMBOLS = {token_type.value: token_type for token_type in OPERATORS}

    def log(self, msg):
        if _SHOULD_LOG_TOKENS:
            print(msg, file=sys.stderr)

    def error(self, error_code, piece=None, column=None):
        if error_code == ErrorCode.EMPTY_INPUT:
            detail = 'nothing to evaluate'
        elif error_code == ErrorCode.OVERFLOW:
            detail = f'{piece!r} at column {column} exceeds {INT_MAX}'
        else:
            detail = f'{piece!r} at column {column}'
        raise LexerError(
            error_code=error_code,
            piece=piece,
            position=column,
            message=f'{error_code.value} -> {detail}',
        )

    def advance(self):
        """Advance the `pos` pointer and set the `current_char` variable."""
        self.pos += 1
        self.column += 1
        if self.pos > len(self.text) - 1:
            self.current_char = None  # Indicates end of input
        else:
            self.current_char = self.text[self.pos]

    def piece(self):
        """Return the characters up to the next delimiter or the end of input."""
        result = ''
        while self.current_char is not None and self.current_char != DELIMITER:
            result += self.current_char
            self.advance()
        return result

    def number(self, piece, column):
        digits = piece.lstrip('0') or '0'
        # compare lengths first so huge literals never reach int()
        if len(digits) > len(str(INT_MAX)) or int(digits) > INT_MAX:
            self.error(ErrorCode.OVERFLOW, piece, column)
        return Token(TokenType.NUMBER, int(digits), self.index, column)

    def get_next_token(self):
        """Lexical analyzer (also known as scanner or tokenizer)

        Every piece between two delimiters must be a whole token, so an
        empty piece (two spaces in a row, a leading or a trailing space)
        is an error rather than something to skip.
        """
        # stepping over the end of the last piece leaves pos past the text
        if self.pos > len(self.text):
            return Token(TokenType.EOF, None, self.index, self.column)

        column = self.column
        piece = self.piece()
        self.advance()  # the delimiter, or the end of input

        if piece and all(char in DIGITS for char in piece):
            token = self.number(piece, column)
        else:
            token_type = self.OPERATOR_SYMBOLS.get(piece)
            if token_type is None:
                self.error(ErrorCode.MALFORMED_TOKEN, piece, column)
            token = Token(token_type, piece, self.index, column)

        self.index += 1
        return token

    def tokenize(self):
        if not self.text.strip():
            self.error(ErrorCode.EMPTY_INPUT)

        tokens = []
        token = self.get_next_token()
        while token.type != TokenType.EOF:
            self.log(f'TOKEN: {token}')
            tokens.append(token)
            token = self.get_next_token()
        return tuple(tokens)


def tokenize(text):
    """Split one line of program text into an immutable tuple of tokens."""
    return Lexer(text).tokenize()


###############################################################################
#                                                                             #
#  PARSER                                                                     #
#                                                                             #
###############################################################################

class AST(object):
    pass


class BinOp(AST):
    def __init__(self, left, op, right):
        self.left = left
        self.token = self.op = op
        self.right = right


class Num(AST):
    def __init__(self, token):
        self.token = token
        self.value = token.value


class Parser(object):
    def __init__(self, tokens):
        self.tokens = tokens

    def error(self, error_code, token, expected=None):
        detail = f'{token}'
        if expected:
            detail += ', expected ' + ' or '.join(tt.name for tt in expected)
        raise ParserError(
            error_code=error_code,
            token=token,
            expected=expected,
            message=f'{error_code.value} -> {detail}',
        )

    def expr(self, lo, hi):
        """
        expr : NUMBER
             | expr (PLUS | MINUS) expr

        Recognizes tokens[lo:hi]. The split is made at the leftmost
        operator, so the left operand is always a single NUMBER and
        everything after the operator becomes the right operand. That is
        what groups `a - b + c` as `a - (b + c)`.
        """
        token = self.tokens[lo]
        if token.type != TokenType.NUMBER:
            self.error(ErrorCode.UNEXPECTED_TOKEN, token, expected=(TokenType.NUMBER,))

        if hi - lo == 1:
            return Num(token)

        op = self.tokens[lo + 1]
        if not op.is_operator:
            self.error(ErrorCode.UNEXPECTED_TOKEN, op, expected=OPERATORS)
        if lo + 2 == hi:
            self.error(ErrorCode.TRAILING_OPERATOR, op)

        return BinOp(left=Num(token), op=op, right=self.expr(lo + 2, hi))

    def parse(self):
        if not self.tokens:
            raise ParserError(
                error_code=ErrorCode.EMPTY_INPUT,
                message=f'{ErrorCode.EMPTY_INPUT.value} -> no tokens to parse',
            )
        return self.expr(0, len(self.tokens))


###############################################################################
#                                                                             #
#  INTERPRETER                                                                #
#                                                                             #
###############################################################################

class NodeVisitor(object):
    def visit(self, node):
        method_name = 'visit_' + type(node).__name__
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node):
        raise Exception('No visit_{} method'.format(type(node).__name__))


class ARType(Enum):
    BASE = 'BASE'
    SPLIT = 'SPLIT'


class ActivationRecord:
    def __init__(self, name, type, nesting_level):
        self.name = name
        self.type = type
        self.nesting_level = nesting_level
        self.members = {}

    def __setitem__(self, key, value):
        self.members[key] = value

    def __str__(self):
        lines = [
            '{level}: {type} {name}'.format(
                level=self.nesting_level,
                type=self.type.value,
                name=self.name,
            )
        ]
        for name, val in self.members.items():
            lines.append(f'   {name:<20}: {val}')

        s = '\n'.join(lines)
        return s

    def __repr__(self):
        return self.__str__()


class CallStack:
    def __init__(self):
        self._records = []

    def push(self, ar):
        self._records.append(ar)

    def pop(self):
        return self._records.pop()

    def __len__(self):
        return len(self._records)

    def __str__(self):
        s = '\n'.join(repr(ar) for ar in reversed(self._records))
        s = f'CALL STACK\n{s}\n'
        return s

    def __repr__(self):
        return self.__str__()


class Interpreter(NodeVisitor):
    def __init__(self, tree):
        self.tree = tree
        self.call_stack = CallStack()

    def log(self, msg):
        if _SHOULD_LOG_STACK:
            print(msg, file=sys.stderr)

    def error(self, error_code, token, left, right):
        raise EvaluationError(
            error_code=error_code,
            token=token,
            message=f'{error_code.value} -> {left} {token.value} {right} '
                    f'at column {token.column} is outside [{INT_MIN}, {INT_MAX}]',
        )

    def visit_BinOp(self, node):
        name = f'{node.op.value} at token {node.op.index}'
        ar = ActivationRecord(name, ARType.SPLIT, len(self.call_stack) + 1)
        self.call_stack.push(ar)
        self.log(f'ENTER: SPLIT {name}')

        try:
            ar['left'] = left = self.visit(node.left)
            ar['right'] = right = self.visit(node.right)
            if node.op.type == TokenType.PLUS:
                result = left + right
            else:
                result = left - right

            if not INT_MIN <= result <= INT_MAX:
                self.error(ErrorCode.OVERFLOW, node.op, left, right)
            ar['result'] = result

            self.log(f'LEAVE: SPLIT {name}')
            self.log(str(self.call_stack))
        finally:
            self.call_stack.pop()
        return result

    def visit_Num(self, node):
        ar = ActivationRecord(
            f'{node.value} at token {node.token.index}', ARType.BASE, len(self.call_stack) + 1
        )
        ar['value'] = node.value
        self.call_stack.push(ar)
        try:
            self.log(f'BASE: {ar.name}')
        finally:
            self.call_stack.pop()
        return node.value

    def interpret(self):
        return self.visit(self.tree)


class RPN(NodeVisitor):
    def __init__(self, tree):
        self.tree = tree

    def visit_BinOp(self, node):
        return self.visit(node.left) + ' ' + self.visit(node.right) + ' ' + node.op.value

    def visit_Num(self, node):
        return str(node.value)

    def interpret(self):
        return self.visit(self.tree)


class LispNotation(NodeVisitor):
    def __init__(self, tree):
        self.tree = tree

    def visit_BinOp(self, node):
        return '(' + node.op.value + ' ' + self.visit(node.left) + ' ' + self.visit(node.right) + ')'

    def visit_Num(self, node):
        return str(node.value)

    def interpret(self):
        return self.visit(self.tree)


def too_deep(tokens):
    operators = sum(1 for token in tokens if token.is_operator)
    return EvaluationError(
        error_code=ErrorCode.TOO_DEEP,
        message=f'{ErrorCode.TOO_DEEP.value} -> {operators} operators '
                f'exceed the recursion limit of {sys.getrecursionlimit()}',
    )


def evaluate_tokens(tokens):
    # one stack frame per split; very long programs run out of stack
    try:
        tree = Parser(tokens).parse()
        return Interpreter(tree).interpret()
    except RecursionError:
        raise too_deep(tokens) from None


def evaluate(text):
    """Evaluate one line of program text and return its integer value.

    Raises a LexerError, ParserError or EvaluationError describing the
    first problem found; no default value is ever substituted.
    """
    return evaluate_tokens(tokenize(text))


NOTATIONS = {
    'rpn': RPN,
    'lisp': LispNotation,
}


def run(text, notation=None):
    """Return the text to print for one program line."""
    if notation is None:
        return str(evaluate(text))

    tokens = tokenize(text)
    try:
        tree = Parser(tokens).parse()
        return NOTATIONS[notation](tree).interpret()
    except RecursionError:
        raise too_deep(tokens) from None


def strip_newline(text):
    if text.endswith('\r\n'):
        return text[:-2]
    if text.endswith('\n'):
        return text[:-1]
    return text


def repl(notation=None):
    while True:
        try:
            text = input('rai> ')
        except EOFError:
            break
        if not text:
            continue
        try:
            print(run(text, notation))
        except Error as e:
            print(e.message, file=sys.stderr)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='RAI - Right-Associative Integer expression interpreter'
    )
    parser.add_argument(
        'inputfile',
        nargs='?',
        help='File holding one line of program text (interactive prompt if omitted)',
    )
    parser.add_argument(
        '--tokens',
        help='Print the token sequence',
        action='store_true',
    )
    parser.add_argument(
        '--stack',
        help='Print stack information',
        action='store_true',
    )
    notation = parser.add_mutually_exclusive_group()
    notation.add_argument(
        '--rpn',
        help='Print the expression in reverse Polish notation instead of its value',
        action='store_const',
        const='rpn',
        dest='notation',
    )
    notation.add_argument(
        '--lisp',
        help='Print the expression in Lisp notation instead of its value',
        action='store_const',
        const='lisp',
        dest='notation',
    )
    args = parser.parse_args(argv)
    global _SHOULD_LOG_TOKENS, _SHOULD_LOG_STACK
    _SHOULD_LOG_TOKENS = args.tokens
    _SHOULD_LOG_STACK = args.stack

    if args.inputfile is None:
        repl(args.notation)
        return

    try:
        with open(args.inputfile, 'r', encoding='utf-8') as f:
            text = strip_newline(f.read())
    except OSError as e:
        print(f'Cannot read {args.inputfile}: {e.strerror}', file=sys.stderr)
        sys.exit(1)
    except UnicodeDecodeError as e:
        print(f'Cannot read {args.inputfile}: not UTF-8 text ({e.reason} at byte {e.start})',
              file=sys.stderr)
        sys.exit(1)

    try:
        print(run(text, args.notation))
    except Error as e:
        print(e.message, file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
