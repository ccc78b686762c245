"""Safe condition language for wizard branching and result rules.

Grammar::

    expr        := comparison (("&&" | "||") comparison)*
    comparison  := operand [op operand]
                 | operand "." "includes" "(" operand ")"
    op          := "==" | "!=" | ">=" | "<=" | ">" | "<"
    operand     := STRING | NUMBER | "true" | "false" | REF

``&&`` and ``||`` have equal precedence and are applied left to right in
the order they appear.  A lone operand is tested for truthiness.  References
are looked up in the visitor's answers; a missing answer is ``""``.

The same language runs in the browser: :data:`EVALUATOR_JS` is the
client-side twin of :func:`evaluate_condition` and is kept in lock-step with
the coercion rules in this module.  Neither side ever executes the
condition text as code, and any parse or evaluation failure makes the whole
condition ``False``.

Known deviations from the language's loose origins, applied on both sides:

* parsing is strict: leftover tokens, a missing operand, an unterminated
  string or a stray parenthesis make the condition false;
* parentheses are only valid around the ``.includes`` argument;
* an empty string is not numeric, so ``missing > -1`` is false;
* an empty list is falsy.
"""

import logging
import math
import re
from typing import Any, List, Mapping, NamedTuple, Optional, Union

logger = logging.getLogger(__name__)


class ConditionSyntaxError(ValueError):
    """Raised by :func:`parse_condition` for malformed condition text."""


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

class Token(NamedTuple):
    kind: str  # str | num | bool | ref | op | includes | lparen | rparen
    value: Any = None


_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_WORD_RE = re.compile(r"[A-Za-z0-9_.]+")
_TWO_CHAR_OPS = ("==", "!=", ">=", "<=", "&&", "||")
_INCLUDES_SUFFIX = ".includes"


def tokenize(expr: str) -> List[Token]:
    tokens: List[Token] = []
    i = 0
    n = len(expr)
    while i < n:
        ch = expr[i]
        if ch in " \t\r\n":
            i += 1
            continue

        if ch in ("'", '"'):
            end = expr.find(ch, i + 1)
            if end == -1:
                raise ConditionSyntaxError(f"unterminated string at {i}")
            tokens.append(Token("str", expr[i + 1:end]))
            i = end + 1
            continue

        number = _NUMBER_RE.match(expr, i)
        if number and (ch.isdigit() or ch == "-"):
            text = number.group()
            tokens.append(Token("num", float(text) if "." in text else int(text)))
            i = number.end()
            continue

        pair = expr[i:i + 2]
        if pair in _TWO_CHAR_OPS:
            tokens.append(Token("op", pair))
            i += 2
            continue
        if ch in "<>":
            tokens.append(Token("op", ch))
            i += 1
            continue
        if ch == "(":
            tokens.append(Token("lparen"))
            i += 1
            continue
        if ch == ")":
            tokens.append(Token("rparen"))
            i += 1
            continue

        word = _WORD_RE.match(expr, i)
        if not word:
            raise ConditionSyntaxError(f"unexpected character {ch!r} at {i}")
        text = word.group()
        i = word.end()
        if text == _INCLUDES_SUFFIX:
            tokens.append(Token("includes"))
        elif text.endswith(_INCLUDES_SUFFIX):
            ref = text[: -len(_INCLUDES_SUFFIX)]
            tokens.append(Token("ref", ref))
            tokens.append(Token("includes"))
        elif text in ("true", "false"):
            tokens.append(Token("bool", text == "true"))
        elif text.startswith(".") or text.endswith(".") or ".." in text:
            raise ConditionSyntaxError(f"malformed reference {text!r}")
        else:
            tokens.append(Token("ref", text))
    return tokens


# ---------------------------------------------------------------------------
# Syntax tree
# ---------------------------------------------------------------------------

class Truthy(NamedTuple):
    operand: Token


class Comparison(NamedTuple):
    left: Token
    op: str  # == != >= <= > < includes
    right: Token


class Logical(NamedTuple):
    op: str  # && ||
    left: "Node"
    right: "Node"


Node = Union[Truthy, Comparison, Logical]

_OPERAND_KINDS = ("str", "num", "bool", "ref")


class _Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def take(self) -> Token:
        token = self.peek()
        if token is None:
            raise ConditionSyntaxError("unexpected end of condition")
        self.pos += 1
        return token

    def expect(self, kind: str) -> Token:
        token = self.take()
        if token.kind != kind:
            raise ConditionSyntaxError(f"expected {kind}, got {token.kind}")
        return token

    def operand(self) -> Token:
        token = self.take()
        if token.kind not in _OPERAND_KINDS:
            raise ConditionSyntaxError(f"expected a value, got {token.kind}")
        return token

    def comparison(self) -> Node:
        left = self.operand()
        token = self.peek()
        if token is None or (token.kind == "op" and token.value in ("&&", "||")):
            return Truthy(left)
        if token.kind == "includes":
            self.take()
            self.expect("lparen")
            argument = self.operand()
            self.expect("rparen")
            return Comparison(left, "includes", argument)
        if token.kind == "op":
            self.take()
            return Comparison(left, token.value, self.operand())
        raise ConditionSyntaxError(f"unexpected {token.kind} after value")

    def expression(self) -> Node:
        node = self.comparison()
        while self.peek() is not None:
            token = self.take()
            if token.kind != "op" or token.value not in ("&&", "||"):
                raise ConditionSyntaxError(f"unexpected {token.kind}")
            node = Logical(token.value, node, self.comparison())
        return node


def parse_condition(expr: str) -> Node:
    tokens = tokenize(expr)
    if not tokens:
        raise ConditionSyntaxError("empty condition")
    return _Parser(tokens).expression()


# ---------------------------------------------------------------------------
# Resolution and coercion
# ---------------------------------------------------------------------------

def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


_NUMERIC_TEXT_RE = re.compile(r"^\s*-?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?\s*$")


def _looks_numeric(value: str) -> bool:
    return bool(_NUMERIC_TEXT_RE.match(value))


def to_number(value) -> float:
    """Numeric view of an answer; ``nan`` when there is none."""
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if _is_number(value):
        return float(value)
    if isinstance(value, str) and _looks_numeric(value):
        return float(value)
    return math.nan


def to_text(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if _is_number(value):
        return str(int(value)) if float(value).is_integer() else str(value)
    if isinstance(value, (list, tuple)):
        return ",".join(to_text(v) for v in value)
    return "" if value is None else str(value)


def resolve(token: Token, answers: Mapping[str, Any]):
    """Value of an operand token.  Unknown references resolve to ``""``."""
    if token.kind != "ref":
        return token.value
    if token.value in answers:
        value = answers[token.value]
        return "" if value is None else value
    # dotted path into nested answers
    current: Any = answers
    for part in token.value.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return ""
        current = current[part]
    return "" if current is None else current


def coerce_pair(left, right):
    """Turn a numeric-looking string into a number when the other side is one."""
    if isinstance(left, str) and _is_number(right) and _looks_numeric(left):
        left = float(left)
    if isinstance(right, str) and _is_number(left) and _looks_numeric(right):
        right = float(right)
    return left, right


def loose_equals(left, right) -> bool:
    left, right = coerce_pair(left, right)
    if _is_number(left) and _is_number(right):
        return float(left) == float(right)
    if isinstance(left, bool) or isinstance(right, bool):
        if isinstance(left, bool) and isinstance(right, bool):
            return left == right
        a, b = to_number(left), to_number(right)
        return a == b
    if isinstance(left, (list, tuple)) and isinstance(right, str):
        return to_text(left) == right
    if isinstance(right, (list, tuple)) and isinstance(left, str):
        return to_text(right) == left
    if type(left) is type(right):
        return left == right
    return False


def truthy(value) -> bool:
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    if _is_number(value):
        return value != 0 and not math.isnan(value)
    return bool(value)


def _strict_equals(left, right) -> bool:
    if _is_number(left) and _is_number(right):
        return left == right
    return type(left) is type(right) and left == right


def _includes(container, item) -> bool:
    if isinstance(container, (list, tuple)):
        return any(_strict_equals(entry, item) for entry in container)
    return to_text(item) in to_text(container)


def _compare(op: str, left, right) -> bool:
    if op == "==":
        return loose_equals(left, right)
    if op == "!=":
        return not loose_equals(left, right)
    left, right = coerce_pair(left, right)
    a, b = to_number(left), to_number(right)
    if math.isnan(a) or math.isnan(b):
        return False
    if op == ">=":
        return a >= b
    if op == "<=":
        return a <= b
    if op == ">":
        return a > b
    if op == "<":
        return a < b
    raise ConditionSyntaxError(f"unknown operator {op}")


def _evaluate(node: Node, answers: Mapping[str, Any]) -> bool:
    if isinstance(node, Truthy):
        return truthy(resolve(node.operand, answers))
    if isinstance(node, Comparison):
        left = resolve(node.left, answers)
        right = resolve(node.right, answers)
        if node.op == "includes":
            return _includes(left, right)
        return _compare(node.op, left, right)
    # Every operand is parsed up front, so both sides are evaluated.
    left = _evaluate(node.left, answers)
    right = _evaluate(node.right, answers)
    return (left and right) if node.op == "&&" else (left or right)


def evaluate_condition(expr: str, answers: Mapping[str, Any]) -> bool:
    """Evaluate *expr* against *answers*; malformed input yields ``False``."""
    try:
        return _evaluate(parse_condition(expr or ""), answers)
    except Exception as exc:
        logger.debug("Condition %r evaluated to false: %s", expr, exc)
        return False


def is_valid_condition(expr: str) -> bool:
    try:
        parse_condition(expr or "")
    except ConditionSyntaxError:
        return False
    return True


# ---------------------------------------------------------------------------
# Client-side twin
# ---------------------------------------------------------------------------

EVALUATOR_JS = r"""
  function isNum(v){return typeof v==='number'}
  function looksNumeric(s){return typeof s==='string'&&/^\s*-?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?\s*$/.test(s)}
  function toNumber(v){
    if(typeof v==='boolean')return v?1:0;
    if(isNum(v))return v;
    if(looksNumeric(v))return Number(v);
    return NaN;
  }
  function toText(v){
    if(Array.isArray(v))return v.map(toText).join(',');
    if(v===null||v===undefined)return '';
    return String(v);
  }
  function coercePair(l,r){
    if(typeof l==='string'&&isNum(r)&&looksNumeric(l))l=Number(l);
    if(typeof r==='string'&&isNum(l)&&looksNumeric(r))r=Number(r);
    return [l,r];
  }
  function looseEquals(l,r){
    var p=coercePair(l,r);l=p[0];r=p[1];
    if(isNum(l)&&isNum(r))return l===r;
    if(typeof l==='boolean'||typeof r==='boolean'){
      if(typeof l==='boolean'&&typeof r==='boolean')return l===r;
      return toNumber(l)===toNumber(r);
    }
    if(Array.isArray(l)&&typeof r==='string')return toText(l)===r;
    if(Array.isArray(r)&&typeof l==='string')return toText(r)===l;
    if(typeof l===typeof r&&!Array.isArray(l)&&!Array.isArray(r))return l===r;
    return false;
  }
  function truthy(v){
    if(Array.isArray(v))return v.length>0;
    if(isNum(v))return v!==0&&!isNaN(v);
    return !!v;
  }
  function tokenize(cond){
    var tokens=[],i=0,n=cond.length,m;
    while(i<n){
      var ch=cond[i];
      if(' \t\r\n'.indexOf(ch)!==-1){i++;continue}
      if(ch==="'"||ch==='"'){
        var end=cond.indexOf(ch,i+1);
        if(end===-1)throw new Error('unterminated string');
        tokens.push({t:'str',v:cond.slice(i+1,end)});i=end+1;continue;
      }
      if(/[0-9-]/.test(ch)&&(m=/^-?\d+(?:\.\d+)?/.exec(cond.slice(i)))){
        tokens.push({t:'num',v:parseFloat(m[0])});i+=m[0].length;continue;
      }
      var pair=cond.slice(i,i+2);
      if(['==','!=','>=','<=','&&','||'].indexOf(pair)!==-1){tokens.push({t:'op',v:pair});i+=2;continue}
      if(ch==='<'||ch==='>'){tokens.push({t:'op',v:ch});i++;continue}
      if(ch==='('){tokens.push({t:'lparen'});i++;continue}
      if(ch===')'){tokens.push({t:'rparen'});i++;continue}
      m=/^[A-Za-z0-9_.]+/.exec(cond.slice(i));
      if(!m)throw new Error('unexpected character');
      var word=m[0];i+=word.length;
      if(word==='.includes'){tokens.push({t:'includes'})}
      else if(word.length>9&&word.slice(-9)==='.includes'){tokens.push({t:'ref',v:word.slice(0,-9)});tokens.push({t:'includes'})}
      else if(word==='true'||word==='false'){tokens.push({t:'bool',v:word==='true'})}
      else if(word[0]==='.'||word[word.length-1]==='.'||word.indexOf('..')!==-1){throw new Error('malformed reference')}
      else tokens.push({t:'ref',v:word});
    }
    return tokens;
  }
  function resolveToken(tok,answers){
    if(tok.t!=='ref')return tok.v;
    if(Object.prototype.hasOwnProperty.call(answers,tok.v)){
      var direct=answers[tok.v];
      return direct===null||direct===undefined?'':direct;
    }
    var cur=answers,parts=tok.v.split('.');
    for(var k=0;k<parts.length;k++){
      if(cur===null||typeof cur!=='object'||!Object.prototype.hasOwnProperty.call(cur,parts[k]))return '';
      cur=cur[parts[k]];
    }
    return cur===null||cur===undefined?'':cur;
  }
  function includes(container,item){
    if(Array.isArray(container))return container.indexOf(item)!==-1;
    return toText(container).indexOf(toText(item))!==-1;
  }
  function compare(op,l,r){
    if(op==='==')return looseEquals(l,r);
    if(op==='!=')return !looseEquals(l,r);
    var p=coercePair(l,r);
    var a=toNumber(p[0]),b=toNumber(p[1]);
    if(isNaN(a)||isNaN(b))return false;
    if(op==='>=')return a>=b;
    if(op==='<=')return a<=b;
    if(op==='>')return a>b;
    if(op==='<')return a<b;
    throw new Error('unknown operator');
  }
  function evalCondition(cond,answers){
    try{
      var tokens=tokenize(String(cond||''));
      if(tokens.length===0)return false;
      var pos=0;
      function take(){if(pos>=tokens.length)throw new Error('unexpected end');return tokens[pos++]}
      function expect(kind){var tok=take();if(tok.t!==kind)throw new Error('expected '+kind);return tok}
      function operand(){
        var tok=take();
        if(['str','num','bool','ref'].indexOf(tok.t)===-1)throw new Error('expected value');
        return resolveToken(tok,answers);
      }
      function comparison(){
        var left=operand();
        var tok=tokens[pos];
        if(!tok||(tok.t==='op'&&(tok.v==='&&'||tok.v==='||')))return truthy(left);
        if(tok.t==='includes'){
          pos++;expect('lparen');var arg=operand();expect('rparen');
          return includes(left,arg);
        }
        if(tok.t==='op'){pos++;return compare(tok.v,left,operand())}
        throw new Error('unexpected token');
      }
      var result=comparison();
      while(pos<tokens.length){
        var op=take();
        if(op.t!=='op'||(op.v!=='&&'&&op.v!=='||'))throw new Error('unexpected token');
        var rhs=comparison();
        result=op.v==='&&'?(result&&rhs):(result||rhs);
      }
      return !!result;
    }catch(e){return false}
  }
"""
