"""Lua scripts executed atomically by Redis.

Redis runs a script to completion before serving any other command, which
makes the membership check and the write that depends on it one step.
"""

# KEYS: count, membership set, actor index
# ARGV: actor member, post id
# Returns {new_count, is_liked}
TOGGLE = """
if redis.call('SISMEMBER', KEYS[2], ARGV[1]) == 1 then
  local n = redis.call('DECR', KEYS[1])
  if n < 0 then
    redis.call('SET', KEYS[1], 0)
    n = 0
  end
  redis.call('SREM', KEYS[2], ARGV[1])
  redis.call('SREM', KEYS[3], ARGV[2])
  return {n, 0}
end
local n = redis.call('INCR', KEYS[1])
redis.call('SADD', KEYS[2], ARGV[1])
redis.call('SADD', KEYS[3], ARGV[2])
return {n, 1}
"""

# KEYS: count, membership set, from-actor index, to-actor index
# ARGV: from member, to member, post id
# Returns the post's count after the move
MOVE_MEMBER = """
local n = tonumber(redis.call('GET', KEYS[1]) or '0')
redis.call('SREM', KEYS[3], ARGV[3])
if redis.call('SREM', KEYS[2], ARGV[1]) == 0 then
  return n
end
if redis.call('SADD', KEYS[2], ARGV[2]) == 0 and n > 0 then
  n = redis.call('DECR', KEYS[1])
end
redis.call('SADD', KEYS[4], ARGV[3])
return n
"""
